from __future__ import annotations

from ..constants import DEFAULT_PROFILE_ID
from ..domain.models import BrowserProfile, TaskStep, TaskTemplate
from .interfaces import EntityKind
from .memory import InMemoryEntityStore


WORDPRESS_TEMPLATE_ID = "wordpress-template"
SCRAPING_TEMPLATE_ID = "scraping-template"


def default_templates(user_id: str) -> list[TaskTemplate]:
    return [
        TaskTemplate(
            id=WORDPRESS_TEMPLATE_ID,
            user_id=user_id,
            name="Bulk WordPress Posts",
            description="Create multiple posts from CSV data",
            category="wordpress",
            steps=[
                TaskStep("upload_csv", "Upload CSV file with post data"),
                TaskStep("generate_content", "Generate content using AI"),
                TaskStep("create_posts", "Create WordPress posts"),
            ],
            variables=[
                {"name": "csv_file", "type": "file", "required": True},
                {"name": "post_status", "type": "select", "options": ["draft", "publish"], "default": "draft"},
            ],
        ),
        TaskTemplate(
            id=SCRAPING_TEMPLATE_ID,
            user_id=user_id,
            name="Data Extraction",
            description="Scrape product information to CSV",
            category="scraping",
            steps=[
                TaskStep("navigate_to_page", "Navigate to target page"),
                TaskStep("extract_data", "Extract specified data"),
                TaskStep("export_csv", "Export data to CSV"),
            ],
            variables=[
                {"name": "target_url", "type": "url", "required": True},
                {"name": "selectors", "type": "json", "required": True},
            ],
        ),
    ]


def seed_default_data(store: InMemoryEntityStore, user_id: str) -> None:
    """Insert the demo profile and templates unless they already exist."""
    if store.get(EntityKind.PROFILES, DEFAULT_PROFILE_ID) is None:
        store.insert(
            EntityKind.PROFILES,
            BrowserProfile(id=DEFAULT_PROFILE_ID, user_id=user_id, name="Default Profile", is_default=True),
        )
    for template in default_templates(user_id):
        if store.get(EntityKind.TEMPLATES, template.id) is None:
            store.insert(EntityKind.TEMPLATES, template)
