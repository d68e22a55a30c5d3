"""Incremental, drill-in filesystem path completion."""

from path_picker.core.candidates import (
    CandidateSequence,
    path_candidates,
    path_completion,
)
from path_picker.core.environment import Environment
from path_picker.core.models import Candidate, CandidateKind, CompletionKind
from path_picker.core.session import (
    CompletionSession,
    SessionState,
    autocompleted_input,
    default_finish_condition,
)
from path_picker.core.surface import CompletionSurface, EventEmitter, Subscription

__all__ = [
    "Candidate",
    "CandidateKind",
    "CandidateSequence",
    "CompletionKind",
    "CompletionSession",
    "CompletionSurface",
    "Environment",
    "EventEmitter",
    "SessionState",
    "Subscription",
    "autocompleted_input",
    "default_finish_condition",
    "path_candidates",
    "path_completion",
]
