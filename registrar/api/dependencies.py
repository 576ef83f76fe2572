"""
FastAPI dependencies

The enforcer, facade and auditor are built once in the application
lifespan and stored on app.state; routes receive them through these
dependencies so tests can swap them with dependency_overrides.
"""
from fastapi import Request

from registrar.services.integrity_auditor import IntegrityAuditor
from registrar.services.integrity_enforcer import IntegrityEnforcer
from registrar.services.query_facade import QueryFacade


def get_integrity_enforcer(request: Request) -> IntegrityEnforcer:
    return request.app.state.enforcer


def get_query_facade(request: Request) -> QueryFacade:
    return request.app.state.queries


def get_integrity_auditor(request: Request) -> IntegrityAuditor:
    return request.app.state.auditor
