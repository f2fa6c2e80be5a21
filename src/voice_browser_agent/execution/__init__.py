from .tracker import SimulatedStepRunner, TaskExecutionTracker, step_progress

__all__ = ["TaskExecutionTracker", "SimulatedStepRunner", "step_progress"]
