"""
FastAPI dependencies giving routes access to the running services.
"""

from typing import Annotated

from fastapi import Depends, Request

from vanity_queue.config import Settings
from vanity_queue.generator import GeneratorAdapter
from vanity_queue.scheduler import Scheduler
from vanity_queue.store import JobStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_scheduler(request: Request) -> Scheduler:
    return request.app.state.scheduler


def get_store(request: Request) -> JobStore:
    return request.app.state.store


def get_generator(request: Request) -> GeneratorAdapter:
    return request.app.state.generator


AppSettings = Annotated[Settings, Depends(get_app_settings)]
SchedulerDep = Annotated[Scheduler, Depends(get_scheduler)]
StoreDep = Annotated[JobStore, Depends(get_store)]
GeneratorDep = Annotated[GeneratorAdapter, Depends(get_generator)]
