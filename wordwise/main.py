import logging
from fastapi import FastAPI
from wordwise.api.routes_documents import router as documents_router
from wordwise.api.routes_suggestions import router as suggestions_router
from wordwise.api.routes_upload import router as upload_router
from wordwise.api.routes_download import router as download_router
from wordwise.api.routes_patterns import router as patterns_router
from wordwise.core import config
from wordwise.middleware.limits import BodySizeLimitMiddleware
from wordwise.services.opportunities import estimate_opportunities
from wordwise.services.patterns import ErrorPatternAggregator
from wordwise.services.providers import default_providers
from wordwise.services.session import AnalysisSession, SessionRegistry
from wordwise.utils.storage import PatternRepository

log = logging.getLogger("wordwise")

app = FastAPI(title="WordWise")

app.add_middleware(BodySizeLimitMiddleware)


def init_state(target: FastAPI) -> None:
    """(Re)build the shared pattern table and an empty document registry."""
    repo = PatternRepository()
    aggregator = ErrorPatternAggregator(repo.load())

    def factory(doc_id: str, text: str, level: str = "intermediate", writing_type: str = "essay") -> AnalysisSession:
        return AnalysisSession(
            doc_id,
            text,
            providers=default_providers(config.USE_LANGUAGETOOL, level=level),
            aggregator=aggregator,
            estimate=estimate_opportunities,
            level=level,
            writing_type=writing_type,
        )

    target.state.patterns_repo = repo
    target.state.aggregator = aggregator
    target.state.sessions = SessionRegistry(factory)
    log.info("Pattern table loaded from %s", repo.path)


init_state(app)

@app.get("/health")
def health():
    return {"status": "ok"}

app.include_router(upload_router)
app.include_router(documents_router)
app.include_router(suggestions_router)
app.include_router(download_router)
app.include_router(patterns_router)
