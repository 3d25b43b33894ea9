"""
Document Template Store

Keeps user-editable document templates on disk. Template bodies are HTML
fragments stored as .html files in the templates directory; names, ids and
descriptions live in templates.json. Placeholders use the {dot.path} syntax
resolved by variables.resolve().
"""
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from config import TEMPLATES_DIR
from models import Template

logger = logging.getLogger(__name__)


class TemplateManager:
    """
    Manages document templates stored locally.

    Templates are stored as .html files in the templates directory.
    Template metadata is stored in templates.json.
    """

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.templates_dir = Path(templates_dir)
        self.templates_dir.mkdir(parents=True, exist_ok=True)
        self.metadata_file = self.templates_dir / "templates.json"
        self._init_metadata()

    def _init_metadata(self):
        """Initialize or load templates metadata."""
        if not self.metadata_file.exists():
            self._save_metadata({})

    def _load_metadata(self) -> Dict:
        """Load templates metadata from JSON file."""
        with open(self.metadata_file, "r") as f:
            return json.load(f)

    def _save_metadata(self, metadata: Dict):
        """Save templates metadata to JSON file."""
        with open(self.metadata_file, "w") as f:
            json.dump(metadata, f, indent=2)

    @staticmethod
    def _filename(name: str) -> str:
        return re.sub(r"[^\w\-]", "_", name.strip().lower()) + ".html"

    def _read(self, name: str, data: Dict) -> Template:
        filepath = self.templates_dir / data["filename"]
        content = filepath.read_text() if filepath.exists() else ""
        return Template(
            id=data["id"],
            name=name,
            description=data.get("description", ""),
            content=content,
        )

    def list_templates(self) -> List[Template]:
        """All templates, ordered by id."""
        metadata = self._load_metadata()
        templates = [self._read(name, data) for name, data in metadata.items()]
        return sorted(templates, key=lambda t: t.id)

    def get_template(self, name: str) -> Optional[Template]:
        """Get a template by name."""
        metadata = self._load_metadata()
        if name not in metadata:
            return None
        return self._read(name, metadata[name])

    def get_template_by_id(self, template_id: int) -> Optional[Template]:
        metadata = self._load_metadata()
        for name, data in metadata.items():
            if data["id"] == template_id:
                return self._read(name, data)
        return None

    def save_template(self, name: str, content: str, description: str = "") -> Template:
        """
        Create a template or replace an existing one with the same name.

        Args:
            name: Template name (shown in the editor's template menu)
            content: Template HTML with {placeholder} tokens
            description: Human-readable description

        Returns:
            The saved Template
        """
        if not name or not name.strip():
            raise ValueError("Template name is required")

        metadata = self._load_metadata()
        now = datetime.now().isoformat()
        existing = metadata.get(name)

        if existing:
            entry = existing
            entry["description"] = description
            entry["updated_at"] = now
        else:
            next_id = max((data["id"] for data in metadata.values()), default=0) + 1
            entry = {
                "id": next_id,
                "filename": self._filename(name),
                "description": description,
                "created_at": now,
                "updated_at": now,
            }

        (self.templates_dir / entry["filename"]).write_text(content)
        metadata[name] = entry
        self._save_metadata(metadata)

        logger.info("Saved template %r (id=%s)", name, entry["id"])
        return self._read(name, entry)

    def delete_template(self, name: str) -> bool:
        """Delete a template."""
        metadata = self._load_metadata()
        if name not in metadata:
            return False

        filepath = self.templates_dir / metadata[name]["filename"]
        if filepath.exists():
            filepath.unlink()

        del metadata[name]
        self._save_metadata(metadata)
        return True

    def template_for_document_type(self, document_type: str) -> Optional[Template]:
        """The template named after a document type, if one exists."""
        return self.get_template(document_type)


# No newlines inside bodies: text nodes are kept verbatim, so they would print as line breaks.
DEFAULT_TEMPLATES = [
    {
        "name": "Demand Letter",
        "description": "Default template for initial demands",
        "content": (
            '<p style="text-align: right">{date}</p>'
            "<p><b>{borrower.name}</b><br>{property.address}</p>"
            "<p><b>Re: Mortgage Registration No. {mortgage.number}</b></p>"
            "<p>Dear {borrower.name},</p>"
            "<p>We act for {lender.name} with respect to the mortgage registered against the above property. "
            "You are in default of your obligations under the mortgage. As of today the balance owing is "
            "${mortgage.balance}, with arrears of ${mortgage.arrears}, and interest continues to accrue at "
            "${mortgage.per_diem} per day.</p>"
            "<p>Unless the arrears are paid within fifteen (15) days of the date of this letter, our client "
            "has instructed us to commence foreclosure proceedings without further notice to you.</p>"
            "<p>Yours truly,</p>"
            "<p><i>Counsel for {lender.name}</i></p>"
        ),
    },
    {
        "name": "Petition",
        "description": "Standard foreclosure petition",
        "content": (
            '<h1 style="text-align: center">PETITION</h1>'
            '<p style="text-align: center">Court File No. {court.file_number}<br>{court.registry} Registry</p>'
            "<p><b>Petitioner:</b> {lender.name}<br><b>Respondent:</b> {borrower.name}</p>"
            "<h2>Orders Sought</h2>"
            "<ul>"
            "<li>A declaration that the mortgage registered as No. {mortgage.number} is in default.</li>"
            "<li>An order nisi of foreclosure against the lands at {property.address}.</li>"
            "<li>Judgment for ${mortgage.balance} plus interest at {mortgage.interest_rate} per annum.</li>"
            "</ul>"
            "<p>Dated {date}.</p>"
        ),
    },
    {
        "name": "Order Nisi",
        "description": "Court order template",
        "content": (
            '<h1 style="text-align: center">ORDER NISI OF FORECLOSURE</h1>'
            '<p style="text-align: center">Court File No. {court.file_number}</p>'
            "<p>BEFORE {court.judge_name}, on {court.hearing_date}.</p>"
            "<p>THIS COURT ORDERS that the amount owing under mortgage No. {mortgage.number} is "
            "${mortgage.balance}, and that the redemption period for the lands at {property.address} "
            "is six (6) months from the date of this order.</p>"
        ),
    },
]


def create_default_templates(manager: TemplateManager = None) -> TemplateManager:
    """Create the default document templates that do not exist yet."""
    manager = manager or TemplateManager()

    for template in DEFAULT_TEMPLATES:
        if manager.get_template(template["name"]) is None:
            manager.save_template(
                name=template["name"],
                content=template["content"],
                description=template["description"],
            )
            logger.info("Created template: %s", template["name"])
        else:
            logger.info("Template already exists: %s", template["name"])

    return manager
