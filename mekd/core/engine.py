"""
MEKD pipeline engine.

A workflow is a YAML list of stages. Each stage names an executor, an
action and its inputs; inputs may reference the request (`inputs.*`)
or earlier stage outputs (`stages.<id>.*`) with `{{ }}` templates.
Stages run strictly in order and the first failure ends the run.
"""
import logging
import re
import time
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from .exceptions import ValidationFailure

logger = logging.getLogger(__name__)

DEFAULT_BASE_PATH = Path(__file__).parent
TEMPLATE_PATTERN = re.compile(r"\{\{\s*(.+?)\s*\}\}")


class StageStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StageResult:
    stage_id: str
    status: StageStatus
    outputs: dict = field(default_factory=dict)
    error: Optional[str] = None
    duration_ms: float = 0


@dataclass
class WorkflowContext:
    """Everything a template can reference during one run."""
    run_id: str
    inputs: dict
    stages: dict = field(default_factory=dict)
    current_stage: Optional[str] = None
    progress_callback: Optional[Callable] = None

    def lookup(self, path: str) -> Any:
        # inputs.form / stages.validate.rasio / context.run_id
        root, *keys = path.split(".")
        if root == "context":
            return getattr(self, keys[0], None) if keys else None
        if root not in ("inputs", "stages"):
            return None

        value: Any = getattr(self, root)
        for key in keys:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
        return value


def to_plain(value: Any) -> Any:
    """Convert records nested in stage outputs to JSON-friendly values."""
    if is_dataclass(value) and not isinstance(value, type):
        return value.to_dict() if hasattr(value, "to_dict") else asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def load_yaml_dir(directory: Path) -> Dict[str, Any]:
    """Every *.yaml file in a directory, keyed by file stem."""
    documents = {}
    if not directory.exists():
        return documents
    for path in sorted(directory.glob("*.yaml")):
        with open(path, encoding="utf-8") as fp:
            documents[path.stem] = yaml.safe_load(fp)
    return documents


class MekdEngine:
    """Runs estimation workflows against registered stage executors"""

    def __init__(self, base_path: Path = None):
        self.base_path = base_path or DEFAULT_BASE_PATH
        self.workflows = load_yaml_dir(self.base_path / "workflows")
        self.knowledge = load_yaml_dir(self.base_path / "knowledge")
        self.executors: Dict[str, Any] = {}
        logger.info(f"Loaded {len(self.workflows)} workflows, {len(self.knowledge)} knowledge bases")

    def register_executor(self, name: str, executor: Any):
        self.executors[name] = executor
        logger.info(f"Registered executor: {name}")

    def get_indicator_specs(self) -> Dict[str, Any]:
        """Indicator definitions keyed by form field name."""
        return self.knowledge.get("indicators", {}).get("indicators", {})

    async def run_workflow(
        self,
        workflow_name: str,
        inputs: dict,
        run_id: str = None,
        progress_callback: Callable = None
    ) -> dict:
        """
        Run every stage of a workflow in order.

        Returns a JSON-friendly summary. `outputs` is filled only when all
        stages completed; stages after a failure are reported as skipped.
        Raises ValueError for an unknown workflow name.
        """
        workflow = self.workflows.get(workflow_name)
        if workflow is None:
            raise ValueError(f"Unknown workflow: {workflow_name}")

        stages: List[dict] = workflow.get("stages", [])
        context = WorkflowContext(
            run_id=run_id or datetime.now().strftime("%Y%m%d_%H%M%S_%f"),
            inputs=inputs,
            progress_callback=progress_callback
        )
        results: Dict[str, StageResult] = {}
        error = None

        for idx, stage in enumerate(stages):
            stage_id = stage["id"]
            context.current_stage = stage_id
            await self._notify(context, {
                "stage": stage_id,
                "stage_name": stage.get("name", stage_id),
                "progress": idx / len(stages) * 100,
                "status": StageStatus.RUNNING.value,
            })

            result = await self._run_stage(stage, context)
            results[stage_id] = result
            if result.status is StageStatus.COMPLETED:
                context.stages[stage_id] = result.outputs
            elif not stage.get("continue_on_error", False):
                error = result.error
                break

        for stage in stages:
            results.setdefault(stage["id"], StageResult(stage_id=stage["id"], status=StageStatus.SKIPPED))

        success = error is None
        await self._notify(context, {
            "stage": "completed" if success else "failed",
            "progress": 100,
            "status": StageStatus.COMPLETED.value if success else StageStatus.FAILED.value,
        })

        return {
            "run_id": context.run_id,
            "workflow": workflow_name,
            "success": success,
            "error": error,
            "stages": {stage_id: to_plain(asdict(r)) for stage_id, r in results.items()},
            "outputs": to_plain(self._collect_outputs(workflow, context)) if success else {},
        }

    async def _run_stage(self, stage: dict, context: WorkflowContext) -> StageResult:
        """Execute one stage; failures come back as a FAILED result"""
        stage_id = stage["id"]
        started = time.perf_counter()
        try:
            outputs = await self._call_executor(stage, context)
        except ValidationFailure as e:
            logger.warning(f"Stage {stage_id} rejected input: {', '.join(e.fields)}")
            return StageResult(
                stage_id=stage_id,
                status=StageStatus.FAILED,
                outputs={"failures": e.fields},
                error=e.message
            )
        except Exception as e:
            logger.error(f"Stage {stage_id} failed: {e}")
            return StageResult(stage_id=stage_id, status=StageStatus.FAILED, error=str(e))

        return StageResult(
            stage_id=stage_id,
            status=StageStatus.COMPLETED,
            outputs=outputs,
            duration_ms=(time.perf_counter() - started) * 1000
        )

    async def _call_executor(self, stage: dict, context: WorkflowContext) -> dict:
        executor_name = stage.get("executor")
        executor = self.executors.get(executor_name)
        if executor is None:
            raise RuntimeError(f"No executor registered for {executor_name}")

        inputs = {key: self._resolve(value, context) for key, value in stage.get("inputs", {}).items()}
        outputs = await executor.run(stage.get("action", "run"), inputs)

        # Executors answer unknown actions with an error dict
        if isinstance(outputs, dict) and "error" in outputs:
            raise RuntimeError(outputs["error"])
        return outputs

    def _resolve(self, value: Any, context: WorkflowContext) -> Any:
        if isinstance(value, str) and "{{" in value:
            return self._resolve_template(value, context)
        return value

    def _resolve_template(self, template: str, context: WorkflowContext) -> Any:
        """`{{ path }}` -> the referenced value itself, not its text"""
        match = TEMPLATE_PATTERN.search(template)
        if not match:
            return template
        return context.lookup(match.group(1))

    def _collect_outputs(self, workflow: dict, context: WorkflowContext) -> dict:
        return {
            key: self._resolve_template(str(template), context)
            for key, template in workflow.get("outputs", {}).items()
        }

    @staticmethod
    async def _notify(context: WorkflowContext, progress: dict):
        if context.progress_callback:
            await context.progress_callback(progress)


_engine: Optional[MekdEngine] = None


def get_engine() -> MekdEngine:
    """Shared engine with all executors registered"""
    global _engine
    if _engine is None:
        from mekd.executors import register_executors

        engine = MekdEngine()
        register_executors(engine)
        _engine = engine
    return _engine
