"""HTTP generation endpoint.

Run with:
    uvicorn api:app --port 8000
"""

from typing import Dict, List

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from domain.errors import NotFoundError, StoreUnavailable, ValidationError
from logging_config import setup_logging
from services.catalog_service import CatalogService
from services.generator_service import ListGenerator

logger = setup_logging(__name__, log_file="api.log")

app = FastAPI(title="Lodestone")

_catalog_service: CatalogService | None = None
_list_generator: ListGenerator | None = None


class GenerateRequest(BaseModel):
    hubId: str = Field(min_length=1)


class GeneratedItemResponse(BaseModel):
    id: str
    name: str
    rarity: str
    price: float
    count: int


class GenerateResponse(BaseModel):
    hubName: str
    items: List[GeneratedItemResponse]


def get_catalog_service() -> CatalogService:
    global _catalog_service
    if _catalog_service is None:
        from config import get_document_store
        from repositories.catalog_repo import CatalogRepository
        _catalog_service = CatalogService(CatalogRepository(get_document_store()))
    return _catalog_service


def get_list_generator() -> ListGenerator:
    global _list_generator
    if _list_generator is None:
        _list_generator = ListGenerator.create_default()
    return _list_generator


@app.get("/healthz")
def healthz() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/generate", response_model=GenerateResponse)
def generate(
    payload: GenerateRequest,
    catalog: CatalogService = Depends(get_catalog_service),
    generator: ListGenerator = Depends(get_list_generator),
) -> GenerateResponse:
    try:
        hub = catalog.get_hub(payload.hubId)
        if not hub.is_public:
            raise NotFoundError(f"Resource hub '{payload.hubId}' not found")
        generated = generator.generate(hub)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreUnavailable as e:
        logger.error(f"Generation for hub {payload.hubId} failed: {e}")
        raise HTTPException(status_code=503, detail="document store unavailable")

    return GenerateResponse(
        hubName=generated.hub_name,
        items=[
            GeneratedItemResponse(
                id=item.provision_id,
                name=item.name,
                rarity=item.rarity.value,
                price=item.price,
                count=item.count,
            )
            for item in generated.items
        ],
    )
