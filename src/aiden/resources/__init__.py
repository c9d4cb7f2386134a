"""Resource wrappers for the Aiden API."""

from __future__ import annotations

from .base import BaseResource  # noqa: F401
from .billing import BillingResource  # noqa: F401
from .chat import ChatResource  # noqa: F401
from .documents import DocumentsResource  # noqa: F401
from .flows import FlowsResource  # noqa: F401
from .knowledge import KnowledgeResource  # noqa: F401
from .notebooks import NotebooksResource  # noqa: F401
from .skills import SkillsResource  # noqa: F401
