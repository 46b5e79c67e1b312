"""
Stage executors for the estimation workflow.

Each executor module exposes `create_executor(config)`.
"""
import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)

# (stage executor name, module)
EXECUTOR_MODULES = [
    ("input-parser", "mekd.executors.input_parser.executor"),
    ("input-validator", "mekd.executors.input_validator.executor"),
    ("estimator", "mekd.executors.estimator.executor"),
    ("report", "mekd.executors.report.executor"),
]


def register_executors(engine: Any) -> None:
    """Register all executors with engine"""
    for executor_name, module_name in EXECUTOR_MODULES:
        module = importlib.import_module(module_name)
        executor = module.create_executor({"knowledge": engine.knowledge})
        engine.register_executor(executor_name, executor)
