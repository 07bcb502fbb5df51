"""
# `app/main.py` — application entry point

Builds the FastAPI app: CORS from `settings.allowed_origins`, logging from `settings.log_level`,
and the routers:
- `/api/carts`    buyer cart
- `/api/orders`   seller sales ledger
- `/api/products` seller inventory

Error responses
- `HTTPException` → its status with `{"detail": msg}`
- invalid request body → 400 `{"errors": [...]}`
- anything else → logged, 500 `{"detail": "Server Error"}`
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.routers import carts, orders, products

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("shop")

# Initialize FastAPI app
app = FastAPI(
    title="Seller Shop API",
    description="Carts checked against live seller inventory, and per-seller sales ledgers.",
    version="1.0.0",
    redirect_slashes=False,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(carts.router)
app.include_router(orders.router)
app.include_router(products.router)


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def _server_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server Error"},
    )


@app.get("/")
def read_root():
    return {"message": "Seller Shop API running"}


# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
