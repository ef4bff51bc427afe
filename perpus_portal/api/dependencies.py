"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request

from perpus_portal.api.controller import PortalController
from perpus_portal.api.sessions import SessionRegistry
from perpus_portal.infrastructure.clients.store import RealtimeStoreClient
from perpus_portal.infrastructure.store.repositories import MemberRepository, TransactionRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store_client() -> RealtimeStoreClient:
    """Provide remote data store client instance"""
    return RealtimeStoreClient()


def get_member_repository(store: RealtimeStoreClient = Depends(get_store_client)) -> MemberRepository:
    return MemberRepository(store)


def get_transaction_repository(store: RealtimeStoreClient = Depends(get_store_client)) -> TransactionRepository:
    return TransactionRepository(store)


def get_controller(
    members: MemberRepository = Depends(get_member_repository),
    transactions: TransactionRepository = Depends(get_transaction_repository),
) -> PortalController:
    return PortalController(members, transactions)


def get_session_registry(request: Request) -> SessionRegistry:
    """Sessions of the running application (created in create_app)"""
    return request.app.state.sessions
