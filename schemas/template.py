"""Template request and response schemas."""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

TemplateStatus = Literal["draft", "active", "archived"]
AccessLevel = Literal["personal", "team", "company"]

TemplateCategory = Literal[
    "cold_outreach",
    "lead_nurturing",
    "discovery",
    "demo",
    "proposal",
    "closing",
    "post_sale",
    "retention",
]

BuyerPersona = Literal[
    "c_level",
    "vp_director",
    "manager",
    "individual_contributor",
    "procurement",
    "technical",
]

Industry = Literal[
    "saas",
    "financial_services",
    "healthcare",
    "ecommerce",
    "manufacturing",
    "real_estate",
    "education",
    "consulting",
]

CompanySize = Literal["smb", "mid_market", "enterprise"]

CampaignType = Literal[
    "lead_generation",
    "event_promotion",
    "content_distribution",
    "reengagement",
    "referral",
]

Tone = Literal["professional", "casual", "urgent", "educational", "humorous"]


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    subject_line: str = Field(min_length=1)
    body_html: str = Field(min_length=1)
    body_plain: Optional[str] = None
    category: Optional[TemplateCategory] = None
    tags: List[str] = Field(default_factory=list)
    persona: Optional[BuyerPersona] = None
    industry: Optional[Industry] = None
    company_size: Optional[CompanySize] = None
    sales_stage: Optional[TemplateCategory] = None
    campaign_type: Optional[CampaignType] = None
    tone: Optional[Tone] = None
    language: str = "en"
    access_level: AccessLevel = "personal"
    custom_fields: Dict[str, Any] = Field(default_factory=dict)


class TemplateUpdate(BaseModel):
    """Partial update: only fields the caller explicitly sets are written.

    Status may move between any two values; there is no transition policy.
    """

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    subject_line: Optional[str] = Field(default=None, min_length=1)
    body_html: Optional[str] = Field(default=None, min_length=1)
    body_plain: Optional[str] = None
    category: Optional[TemplateCategory] = None
    tags: Optional[List[str]] = None
    persona: Optional[BuyerPersona] = None
    industry: Optional[Industry] = None
    company_size: Optional[CompanySize] = None
    sales_stage: Optional[TemplateCategory] = None
    campaign_type: Optional[CampaignType] = None
    tone: Optional[Tone] = None
    language: Optional[str] = None
    status: Optional[TemplateStatus] = None
    access_level: Optional[AccessLevel] = None
    custom_fields: Optional[Dict[str, Any]] = None

    @field_validator(
        "name",
        "subject_line",
        "body_html",
        "tags",
        "language",
        "status",
        "access_level",
        "custom_fields",
    )
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        """These columns are NOT NULL; omit the field instead of sending null."""
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class TemplateListQuery(BaseModel):
    """Query-string filters, pagination and sort for the template list.

    sort_by / sort_order stay free-form strings here; they are resolved
    against the sortable column allowlist when the query is built.
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort_by: str = "created_at"
    sort_order: str = "desc"

    search: Optional[str] = None
    category: Optional[TemplateCategory] = None
    persona: Optional[BuyerPersona] = None
    industry: Optional[Industry] = None
    company_size: Optional[CompanySize] = None
    sales_stage: Optional[TemplateCategory] = None
    campaign_type: Optional[CampaignType] = None
    tone: Optional[Tone] = None
    status: Optional[TemplateStatus] = None
    access_level: Optional[AccessLevel] = None
    tags: Optional[List[str]] = None
    created_by: Optional[UUID] = None
    min_reply_rate: Optional[float] = Field(default=None, ge=0, le=100)
    max_reply_rate: Optional[float] = Field(default=None, ge=0, le=100)
    is_favorite: bool = False


class TemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    name: str
    description: Optional[str] = None
    subject_line: str
    body_html: str
    body_plain: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    persona: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    sales_stage: Optional[str] = None
    campaign_type: Optional[str] = None
    tone: Optional[str] = None
    language: str
    status: str
    access_level: str
    version: int
    parent_template_id: Optional[UUID] = None
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    last_used_at: Optional[datetime] = None
    use_count: int
    custom_fields: Dict[str, Any] = Field(default_factory=dict)
    is_public: bool


class TemplateWithPerformance(TemplateRead):
    open_rate: Optional[float] = None
    click_rate: Optional[float] = None
    reply_rate: Optional[float] = None
    sends: Optional[int] = None
    replies: Optional[int] = None
    is_favorite: bool = False


class TemplatePage(BaseModel):
    items: List[TemplateWithPerformance]
    total: int
