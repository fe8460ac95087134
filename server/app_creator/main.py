from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app_creator.api.generate import router as generate_router
from app_creator.api.wizard import catalog_router, router as wizard_router
from app_creator.core.logging import configure_logging
from app_creator.core.session import NotFound
from app_creator.core.wizard import WizardError

configure_logging()

app = FastAPI(title="App Creator Backend")


@app.exception_handler(WizardError)
async def wizard_error_handler(request: Request, exc: WizardError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": f"not found: {exc.args[0] if exc.args else ''}"})


app.include_router(catalog_router)
app.include_router(wizard_router, prefix="/sessions")
app.include_router(generate_router, prefix="/sessions")
