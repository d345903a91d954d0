from datetime import datetime, timezone
from beanie import Document
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseDocument(Document):
    """Base document class with common timestamp fields and methods"""

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        abstract = True  # Make this an abstract base class

    def update_timestamp(self):
        """Update the last modified timestamp"""
        self.updated_at = datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """API schema that accepts snake_case or camelCase keys and emits camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
