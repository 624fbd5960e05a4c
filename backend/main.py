import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import AppError, InternalError
from backend.database import init_schema
from backend.routes import auth_routes, parent_routes, student_routes, university_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.message})


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error on %s %s', request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=InternalError.status_code, content={'detail': InternalError.default_message})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=InternalError.status_code, content={'detail': InternalError.default_message})


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        init_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'College Application Tracker API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(student_routes.router, prefix='/student')
app.include_router(parent_routes.router, prefix='/parent')
app.include_router(university_routes.router, prefix='/universities')


def run() -> None:
    uvicorn.run('backend.main:app', host=config.HOST, port=config.PORT)


if __name__ == '__main__':
    run()
