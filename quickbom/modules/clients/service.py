from supabase import Client
from quickbom.core.errors import is_unique_violation
from quickbom.modules.clients.schemas import (
    ClientCreate, ClientUpdate, ClientResponse, ClientDetailResponse, ClientProject,
)
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from enum import Enum
import logging
import re

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = ("company_name", "contact_person", "contact_email", "city")
ACTIVE_STATUSES = ("IN_PROGRESS", "APPROVED")
CLOSED_STATUSES = ("COMPLETED", "CANCELLED")


def project_stats(projects: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Counts and contract values derived from a client's projects."""
    def price(p):
        return float(p.get("total_price") or 0)

    return {
        "total_projects": len(projects),
        "active_projects": sum(1 for p in projects if p.get("status") in ACTIVE_STATUSES),
        "completed_projects": sum(1 for p in projects if p.get("status") == "COMPLETED"),
        "total_contract_value": sum(price(p) for p in projects),
        "outstanding_balance": sum(price(p) for p in projects if p.get("status") not in CLOSED_STATUSES),
    }


class ClientService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_row(self, client_id: int) -> Dict[str, Any]:
        result = self.supabase.table("clients").select("*").eq("id", client_id).maybe_single().execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Client not found")
        return result.data

    def _email_owner(self, email: str) -> Optional[int]:
        result = self.supabase.table("clients").select("id").eq("contact_email", email).limit(1).execute()
        return result.data[0]["id"] if result.data else None

    def _projects_by_client(self, client_ids: List[int]) -> Dict[int, List[Dict[str, Any]]]:
        if not client_ids:
            return {}
        result = self.supabase.table("projects")\
            .select("id, name, status, total_price, client_id")\
            .in_("client_id", client_ids)\
            .order("created_at", desc=True)\
            .execute()
        by_client: Dict[int, List[Dict[str, Any]]] = {cid: [] for cid in client_ids}
        for row in result.data or []:
            by_client.setdefault(row["client_id"], []).append(row)
        return by_client

    @staticmethod
    def _row_data(data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: (v.value if isinstance(v, Enum) else v) for k, v in data.items()}

    def create_client(self, data: ClientCreate) -> ClientResponse:
        try:
            if self._email_owner(data.contact_email) is not None:
                raise HTTPException(status_code=400, detail="Contact email already exists")
            result = self.supabase.table("clients").insert(self._row_data(data.model_dump())).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create client")
            logger.info(f"Created client {result.data[0]['id']}")
            return ClientResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=400, detail="Contact email already exists")
            logger.error(f"Error creating client: {e}")
            raise HTTPException(status_code=500, detail="Failed to create client")

    def get_client(self, client_id: int) -> ClientDetailResponse:
        """Client with its projects and the derived project statistics."""
        try:
            row = self._get_row(client_id)
            projects = self._projects_by_client([client_id])[client_id]
            return ClientDetailResponse(
                **{**row, **project_stats(projects)},
                projects=[ClientProject(**p) for p in projects],
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch client")

    def list_clients(
        self,
        client_type: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[ClientResponse]:
        try:
            query = self.supabase.table("clients").select("*")
            # "all" is what the filter dropdowns send for no filter
            if client_type and client_type != "all":
                query = query.eq("client_type", client_type)
            if status and status != "all":
                query = query.eq("status", status)
            if category and category != "all":
                query = query.eq("category", category)
            if search:
                # PostgREST or= syntax reserves commas and parentheses
                term = re.sub(r"[,()]", " ", search).strip()
                if term:
                    query = query.or_(",".join(f"{col}.ilike.%{term}%" for col in SEARCH_COLUMNS))
            result = query.order("created_at", desc=True).execute()
            rows = result.data or []
            projects = self._projects_by_client([row["id"] for row in rows])
            return [ClientResponse(**{**row, **project_stats(projects.get(row["id"], []))}) for row in rows]
        except Exception as e:
            logger.error(f"Error listing clients: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch clients")

    def update_client(self, client_id: int, data: ClientUpdate) -> ClientDetailResponse:
        try:
            existing = self._get_row(client_id)
            update_data = self._row_data(data.model_dump(exclude_unset=True))
            email = update_data.get("contact_email")
            if email and email != existing.get("contact_email"):
                owner = self._email_owner(email)
                if owner is not None and owner != client_id:
                    raise HTTPException(status_code=400, detail="Contact email already taken by another client")
            if update_data:
                self.supabase.table("clients").update(update_data).eq("id", client_id).execute()
            return self.get_client(client_id)
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=400, detail="Contact email already taken by another client")
            logger.error(f"Error updating client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update client")

    def delete_client(self, client_id: int) -> None:
        """Delete a client unless projects still reference it."""
        try:
            self._get_row(client_id)
            projects = self.supabase.table("projects").select("id").eq("client_id", client_id).execute()
            if projects.data:
                raise HTTPException(
                    status_code=400,
                    detail="Cannot delete client with existing projects. "
                           "Please reassign or delete related projects first."
                )
            self.supabase.table("clients").delete().eq("id", client_id).execute()
            logger.info(f"Deleted client {client_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete client")
