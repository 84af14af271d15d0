import asyncio
import logging
import random
import time
from fastapi import FastAPI, HTTPException
from typing import List
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from autopath.domain import config
from autopath.domain.errors import UnknownEdgeError, UnknownNodeError
from autopath.domain.models import (
    DecisionLogEntry, EndpointUpdate, IncidentRequest, IncidentResult, Metrics,
    PenaltyUpdate, RouteView, SimulationStatus
)
from autopath.kernel.simulation_kernel import SimulationKernel

logger = logging.getLogger(__name__)

# Initialize Kernel
kernel = SimulationKernel()
incident_rng = random.Random()

# Background task for simulation loop
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Start the simulation loop
    kernel.initialize() # Deterministic seed
    loop_task = asyncio.create_task(run_simulation())
    yield
    # Shutdown
    loop_task.cancel()

app = FastAPI(lifespan=lifespan)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

async def run_simulation():
    """Runs the simulation update loop at one tick per kernel.dt"""
    dt = kernel.dt

    while True:
        start_time = time.time()

        kernel.run_tick()

        # Sleep to maintain frame rate
        elapsed = time.time() - start_time
        sleep_time = max(0.0, dt - elapsed)
        await asyncio.sleep(sleep_time)

def _status(message: str) -> SimulationStatus:
    status = kernel.get_status()
    status.message = message
    return status

@app.get("/api/route", response_model=RouteView)
async def get_route():
    """Returns the committed path and its estimated travel time"""
    return kernel.get_route()

@app.get("/api/metrics", response_model=Metrics)
async def get_metrics():
    return kernel.get_metrics()

@app.get("/api/logs", response_model=List[DecisionLogEntry])
async def get_logs():
    """Returns the decision log, most recent first"""
    return kernel.get_logs()

@app.get("/api/snapshot")
async def get_snapshot():
    """Returns the render payload for the map layer"""
    return kernel.get_snapshot()

@app.get("/api/simulation/status", response_model=SimulationStatus)
async def get_simulation_status():
    return kernel.get_status()

@app.post("/api/simulation/start", response_model=SimulationStatus)
async def start_simulation():
    kernel.start()
    return _status("Start queued")

@app.post("/api/simulation/pause", response_model=SimulationStatus)
async def pause_simulation():
    kernel.pause()
    return _status("Pause queued")

@app.post("/api/simulation/reset", response_model=SimulationStatus)
async def reset_simulation():
    kernel.reset()
    return _status("Reset queued")

@app.post("/api/route/start", response_model=SimulationStatus)
async def set_start(update: EndpointUpdate):
    """Moves the trip origin; applied with a reset on the next tick"""
    try:
        kernel.set_start(update.nodeId)
    except UnknownNodeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _status(f"Start {update.nodeId} queued")

@app.post("/api/route/end", response_model=SimulationStatus)
async def set_end(update: EndpointUpdate):
    """Moves the trip destination; applied with a reset on the next tick"""
    try:
        kernel.set_end(update.nodeId)
    except UnknownNodeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _status(f"End {update.nodeId} queued")

@app.post("/api/penalty", response_model=SimulationStatus)
async def set_penalty_weight(update: PenaltyUpdate):
    kernel.set_penalty_weight(update.penaltyWeight)
    return _status(f"Penalty weight {update.penaltyWeight:g} queued")

@app.post("/api/incidents", response_model=IncidentResult)
async def inject_incident(request: IncidentRequest):
    """Forces an edge into an incident state"""
    try:
        kernel.inject_incident(request.edgeId, request.speed, request.reason)
    except UnknownEdgeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"edgeId": request.edgeId, "speed": request.speed, "reason": request.reason, "status": "queued"}

@app.post("/api/incidents/random", response_model=IncidentResult)
async def inject_random_incident():
    """Picks a random edge that is not already an incident and degrades it"""
    candidates = [e.id for e in kernel.network.edges() if not e.incident]
    if not candidates:
        raise HTTPException(status_code=409, detail="Every edge already has an incident")
    edge_id = incident_rng.choice(candidates)
    kernel.inject_incident(edge_id, config.INCIDENT_SPEED, config.INCIDENT_REASON)
    return {"edgeId": edge_id, "speed": config.INCIDENT_SPEED, "reason": config.INCIDENT_REASON,
            "status": "queued"}

@app.delete("/api/incidents/{edge_id}", response_model=IncidentResult)
async def clear_incident(edge_id: str):
    try:
        kernel.clear_incident(edge_id)
    except UnknownEdgeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    base_speed = kernel.network.edge(edge_id).base_speed
    return {"edgeId": edge_id, "speed": base_speed, "reason": "cleared", "status": "queued"}

@app.get("/")
def read_root():
    return {"status": "AutoPath Routing Engine Running (Deterministic Kernel)"}
