from fastapi import APIRouter, Request
from wordwise.api.deps import aggregator, persist_patterns

router = APIRouter(tags=["patterns"])

@router.get("/patterns")
def patterns(request: Request):
    return aggregator(request).snapshot().model_dump(mode="json")

@router.delete("/patterns")
def reset_patterns(request: Request):
    aggregator(request).reset()
    persist_patterns(request)
    return aggregator(request).snapshot().model_dump(mode="json")
