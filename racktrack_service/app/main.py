# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from shared.models import users, user_login_session, refresh_token
from .models.warehouse import warehouses, aisles, shelves, storage_slots
from .models.inventory import products, pallets, inventory_items, inventory_movements
from .models.production import (
    activities, boms, job_material_consumption, job_routes, jobs, production_issues,
    work_center_activities, work_centers)
from .models.sales import customers, customer_pos, invoices
from .models.quickbooks import qb_connections

from .router.warehouse import warehouses_router, locations_router
from .router.inventory import products_router, pallets_router, inventory_router
from .router.production import (
    activities_router, boms_router, job_routes_router, jobs_router, production_issues_router,
    production_router, work_centers_router)
from .router.sales import customers_router, customer_pos_router, invoices_router
from .router.quickbooks import quickbooks_router

# Create all tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="RackTrack Service API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(JsonResponseMiddleware)

setup_exception_handlers(app)

# Include routers
app.include_router(warehouses_router.router)
app.include_router(locations_router.router)
app.include_router(products_router.router)
app.include_router(pallets_router.router)
app.include_router(inventory_router.router)
app.include_router(work_centers_router.router)
app.include_router(activities_router.router)
app.include_router(jobs_router.router)
app.include_router(job_routes_router.router)
app.include_router(boms_router.router)
app.include_router(production_issues_router.router)
app.include_router(production_router.router)
app.include_router(customers_router.router)
app.include_router(customer_pos_router.router)
app.include_router(invoices_router.router)
app.include_router(quickbooks_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
