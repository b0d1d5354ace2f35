from .template import (
    AccessLevel,
    TemplateStatus,
    TemplateCreate,
    TemplateUpdate,
    TemplateListQuery,
    TemplateRead,
    TemplateWithPerformance,
    TemplatePage,
)
from .library import (
    SnippetType,
    SnippetCreate,
    SnippetUpdate,
    CollectionCreate,
)

__all__ = [
    "AccessLevel", "TemplateStatus",
    "TemplateCreate", "TemplateUpdate", "TemplateListQuery",
    "TemplateRead", "TemplateWithPerformance", "TemplatePage",
    "SnippetType", "SnippetCreate", "SnippetUpdate", "CollectionCreate",
]
