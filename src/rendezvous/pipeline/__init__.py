"""Command pipeline: stage handlers and the command that runs them."""

from rendezvous.pipeline.base import BaseAsyncHandler
from rendezvous.pipeline.cache_stage import CacheStage
from rendezvous.pipeline.command import RendezvousCommand
from rendezvous.pipeline.describer_stage import DescriberStage
from rendezvous.pipeline.reply_stage import ReplyStage
from rendezvous.pipeline.solver_stage import SolverStage
from rendezvous.pipeline.validation_stage import ValidationStage

__all__ = [
    "BaseAsyncHandler",
    "CacheStage",
    "DescriberStage",
    "RendezvousCommand",
    "ReplyStage",
    "SolverStage",
    "ValidationStage",
]
