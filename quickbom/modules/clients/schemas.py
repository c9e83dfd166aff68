from enum import Enum
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from quickbom.core.schemas import CamelModel
from quickbom.modules.projects.schemas import ProjectStatus


class ClientType(str, Enum):
    INDIVIDUAL = "INDIVIDUAL"
    COMPANY = "COMPANY"
    GOVERNMENT = "GOVERNMENT"
    CONTRACTOR = "CONTRACTOR"
    PARTNERSHIP = "PARTNERSHIP"
    NON_PROFIT = "NON_PROFIT"


class ClientCategory(str, Enum):
    RESIDENTIAL = "RESIDENTIAL"
    COMMERCIAL = "COMMERCIAL"
    INDUSTRIAL = "INDUSTRIAL"
    INSTITUTIONAL = "INSTITUTIONAL"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    RENOVATION = "RENOVATION"
    LAND_DEVELOPMENT = "LAND_DEVELOPMENT"


class ClientStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLACKLISTED = "BLACKLISTED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    UNDER_REVIEW = "UNDER_REVIEW"


class ClientBase(CamelModel):
    client_type: ClientType = ClientType.INDIVIDUAL
    category: ClientCategory = ClientCategory.RESIDENTIAL
    status: ClientStatus = ClientStatus.ACTIVE
    company_name: Optional[str] = None
    company_type: Optional[str] = None
    business_license: Optional[str] = None
    tax_id: Optional[str] = None
    contact_title: Optional[str] = None
    contact_phone2: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "Indonesia"
    industry: Optional[str] = None
    company_size: Optional[str] = None
    annual_revenue: Optional[float] = Field(None, ge=0)
    credit_limit: Optional[float] = Field(None, ge=0)
    payment_terms: Optional[str] = None
    website: Optional[str] = None
    special_notes: Optional[str] = None


class ClientCreate(ClientBase):
    contact_person: str = Field(min_length=1)
    contact_email: str = Field(min_length=1)
    contact_phone: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    province: str = Field(min_length=1)


class ClientUpdate(CamelModel):
    client_type: Optional[ClientType] = None
    category: Optional[ClientCategory] = None
    status: Optional[ClientStatus] = None
    company_name: Optional[str] = None
    company_type: Optional[str] = None
    business_license: Optional[str] = None
    tax_id: Optional[str] = None
    contact_person: Optional[str] = Field(None, min_length=1)
    contact_title: Optional[str] = None
    contact_email: Optional[str] = Field(None, min_length=1)
    contact_phone: Optional[str] = Field(None, min_length=1)
    contact_phone2: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    province: Optional[str] = Field(None, min_length=1)
    postal_code: Optional[str] = None
    country: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    annual_revenue: Optional[float] = Field(None, ge=0)
    credit_limit: Optional[float] = Field(None, ge=0)
    payment_terms: Optional[str] = None
    website: Optional[str] = None
    special_notes: Optional[str] = None


class ClientProject(CamelModel):
    id: int
    name: str
    status: ProjectStatus = ProjectStatus.PLANNING
    total_price: float = 0


class ClientResponse(ClientBase):
    id: int
    contact_person: str
    contact_email: str
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    total_contract_value: float = 0
    outstanding_balance: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClientDetailResponse(ClientResponse):
    projects: List[ClientProject] = Field(default_factory=list)
