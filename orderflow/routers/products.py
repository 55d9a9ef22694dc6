# orderflow/routers/products.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from orderflow.database import get_session
from orderflow.repositories.catalog_repo import CatalogRepository
from orderflow.schemas.product import CatalogItemRead
from orderflow.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["Products"])

repo = CatalogRepository()
service = CatalogService(repo)


@router.get("", response_model=list[CatalogItemRead])
def list_products(session: Session = Depends(get_session)):
    """
    List orderable products.

    - Public endpoint.
    - Only items with stock > 0, ordered by category then name.
    """
    return service.list_available(session)
