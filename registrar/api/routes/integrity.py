"""
Integrity Audit API Endpoints

GET /api/v1/integrity/audit               - Audit every table
GET /api/v1/integrity/audit/:table_name   - Audit one table
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Path

from registrar.api.dependencies import get_integrity_auditor
from registrar.services.integrity_auditor import IntegrityAuditor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/integrity", tags=["integrity"])


@router.get("/audit")
async def audit_all_tables(
    auditor: IntegrityAuditor = Depends(get_integrity_auditor),
) -> Dict[str, Any]:
    """
    Run the integrity audit over every table.

    Returns:
        Per-table violations and an overall consistent flag
    """
    return {"data": await auditor.audit_all()}


@router.get("/audit/{table_name}")
async def audit_table(
    table_name: str = Path(..., description="Table name to audit"),
    auditor: IntegrityAuditor = Depends(get_integrity_auditor),
) -> Dict[str, Any]:
    try:
        result = await auditor.audit_table(table_name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"data": result}
