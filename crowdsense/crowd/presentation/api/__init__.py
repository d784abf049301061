"""
API package.
"""
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import crowd, settings

# Initialize main app
app = FastAPI(title="CrowdSense API")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(crowd.app.router, tags=["crowd"])
app.include_router(settings.app.router, tags=["settings"])


def init_app(components: Dict):
    """Wires the components returned by CrowdApplicationBuilder.get_components()."""
    crowd.init_service(components["service"], components.get("traffic"))
    settings.init_store(components["settings_store"])


@app.get("/status")
def status():
    return {"status": "running", "service_active": crowd._service is not None}


@app.get("/metrics")
def get_metrics():
    service = crowd.get_service()
    return service.metrics.get_metrics().to_dict()
