from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from dataclasses import asdict
from typing import AsyncIterator, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from simulation import CabConfig, Controller, Simulation

logger = logging.getLogger(__name__)


class HallCallRequest(BaseModel):
    floor: int
    direction: str


class CarCallRequest(BaseModel):
    floor: int


class TickRequest(BaseModel):
    count: int = Field(default=1, ge=1, le=10_000)


class BuildingSettings(BaseModel):
    min_floor: int = 0
    max_floor: int = 10
    start_floor: int = 0
    door_dwell_ticks: int = 1


class SimulationManager:
    def __init__(self, config: Optional[CabConfig] = None, tick_interval: float = 0.5) -> None:
        self.config = config or CabConfig()
        self.simulation = Simulation(Controller.from_config(self.config))
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.simulation.step()
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        logger.info("Stream client connected (%d total)", len(self.clients))
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
            logger.info("Stream client disconnected (%d left)", len(self.clients))
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        metrics = asdict(self.simulation.metrics.snapshot(self.simulation.current_time))
        return {
            "time": self.simulation.current_time,
            "cab": self.simulation.controller.snapshot().as_dict(),
            "idle": self.simulation.controller.is_idle(),
            "metrics": metrics,
        }

    async def submit_hall_call(self, floor: int, direction: str) -> dict:
        async with self._lock:
            self.simulation.submit_hall_call(floor, direction)
            return self.current_state()

    async def submit_car_call(self, floor: int) -> dict:
        async with self._lock:
            self.simulation.submit_car_call(floor)
            return self.current_state()

    async def tick(self, count: int) -> dict:
        async with self._lock:
            actions = [self.simulation.step().value for _ in range(count)]
            state = self.current_state()
            state["actions"] = actions
            return state

    async def reset(self, config: Optional[CabConfig] = None) -> dict:
        async with self._lock:
            config = config or self.config
            # A rejected config keeps the current simulation.
            simulation = Simulation(Controller.from_config(config))
            self.config = config
            self.simulation = simulation
            return self.current_state()


manager = SimulationManager()


@contextlib.asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    await manager.start()
    try:
        yield
    finally:
        await manager.stop()


app = FastAPI(title="Single-cab SCAN elevator API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/calls/hall")
async def submit_hall_call(request: HallCallRequest) -> dict:
    try:
        return await manager.submit_hall_call(request.floor, request.direction)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/calls/car")
async def submit_car_call(request: CarCallRequest) -> dict:
    try:
        return await manager.submit_car_call(request.floor)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/tick")
async def tick(request: Optional[TickRequest] = None) -> dict:
    count = request.count if request is not None else 1
    return await manager.tick(count)


@app.post("/reset")
async def reset(settings: Optional[BuildingSettings] = None) -> dict:
    config = CabConfig(**settings.model_dump()) if settings is not None else None
    try:
        return await manager.reset(config)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
