"""Ordered reconcile pipeline for DataProtectionApplication resources."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from kubernetes import client

from . import metrics
from .config import OperatorConfig
from .constants import API_GROUP, API_VERSION, KIND_DPA, PLURAL_DPA
from .steps import DEFAULT_STEPS
from .tracing import trace_span
from .utils.conditions import set_reconciled_condition
from .utils.errors import sanitize_exception
from .utils.events import EventRecorder, emit_event
from .utils.watch import ObjectKey

logger = logging.getLogger(__name__)


@dataclass
class ReconcileContext:
    """Everything a step may use during one reconcile of one resource."""

    dpa: dict[str, Any]
    core_api: client.CoreV1Api
    config: OperatorConfig
    recorder: EventRecorder = emit_event
    logger: logging.Logger = field(default=logger)

    @property
    def meta(self) -> dict[str, Any]:
        return self.dpa["metadata"]

    @property
    def spec(self) -> dict[str, Any]:
        return self.dpa.get("spec") or {}

    @property
    def name(self) -> str:
        return self.meta["name"]

    @property
    def namespace(self) -> str:
        return self.meta["namespace"]


# A step returns False to stop the pipeline cleanly and raises to stop it with an error.
ReconcileStep = Callable[[ReconcileContext], bool]


def run_steps(ctx: ReconcileContext, steps: Sequence[ReconcileStep]) -> bool:
    """Run steps in order until one returns False or raises.

    Returns:
        True if every step ran, False if a step stopped the pipeline
    """
    for step in steps:
        step_name = getattr(step, "__name__", repr(step))
        start_time = time.time()
        try:
            if not step(ctx):
                ctx.logger.info(f"Reconcile of {ctx.namespace}/{ctx.name} stopped by {step_name}")
                return False
        finally:
            metrics.reconcile_step_duration_seconds.labels(step=step_name).observe(
                time.time() - start_time
            )
    return True


class DataProtectionApplicationReconciler:
    """Drives a DataProtectionApplication through the reconcile steps.

    The reconciler holds only injected collaborators; every call reads the
    resource afresh and writes its outcome to the ``Reconciled`` condition.
    """

    def __init__(
        self,
        custom_api: client.CustomObjectsApi,
        core_api: client.CoreV1Api,
        config: OperatorConfig,
        steps: Sequence[ReconcileStep] | None = None,
        recorder: EventRecorder = emit_event,
    ) -> None:
        self.custom_api = custom_api
        self.core_api = core_api
        self.config = config
        self.steps = tuple(DEFAULT_STEPS if steps is None else steps)
        self.recorder = recorder

    def get(self, key: ObjectKey) -> dict[str, Any] | None:
        """Fetch the resource, returning None when it no longer exists."""
        try:
            return self.custom_api.get_namespaced_custom_object(
                group=API_GROUP,
                version=API_VERSION,
                namespace=key.namespace,
                plural=PLURAL_DPA,
                name=key.name,
            )
        except client.exceptions.ApiException as e:
            if e.status == 404:
                return None
            raise

    def update_status(self, dpa: dict[str, Any]) -> None:
        """Write the status subresource, guarded by the fetched resourceVersion."""
        meta = dpa["metadata"]
        self.custom_api.replace_namespaced_custom_object_status(
            group=API_GROUP,
            version=API_VERSION,
            namespace=meta["namespace"],
            plural=PLURAL_DPA,
            name=meta["name"],
            body=dpa,
        )

    def reconcile(self, key: ObjectKey) -> None:
        """Run the pipeline for one resource and record the aggregated outcome.

        Raises:
            Exception: The first step error, or the status write error when
                every step succeeded
        """
        dpa = self.get(key)
        if dpa is None:
            logger.info(f"{KIND_DPA} {key.namespace}/{key.name} not found, nothing to reconcile")
            return

        ctx = ReconcileContext(
            dpa=dpa,
            core_api=self.core_api,
            config=self.config,
            recorder=self.recorder,
        )

        error: Exception | None = None
        with trace_span("reconcile_dpa", kind=KIND_DPA, attributes={"dpa.name": key.name}):
            try:
                completed = run_steps(ctx, self.steps)
            except Exception as e:
                error = e
                completed = False
                logger.error(
                    f"Reconcile of {key.namespace}/{key.name} failed: {sanitize_exception(e)}"
                )

        if error is None and not completed:
            return

        status = dpa.get("status") or {}
        status["conditions"] = set_reconciled_condition(
            list(status.get("conditions") or []),
            error,
            observed_generation=dpa["metadata"].get("generation"),
        )
        dpa["status"] = status

        try:
            self.update_status(dpa)
        except Exception as status_error:
            if error is None:
                raise
            logger.error(
                f"Failed to record failure status on {key.namespace}/{key.name}: "
                f"{sanitize_exception(status_error)}"
            )

        if error is not None:
            raise error
