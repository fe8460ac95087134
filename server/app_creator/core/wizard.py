# app_creator/core/wizard.py
"""
Step sequencer for the three wizard flows.

A position in the wizard is a (flow, step) pair. The steps that belong to
each flow live in FLOW_STEPS; a WizardPosition refuses to be built for a
step its flow does not have, so "step 4 of the frontend flow" cannot exist.

The last step of every flow is the generation step. ``advance`` never
enters it: the generation step is only reachable through ``enter_generation``
(driven by the orchestrator in core/codegen_agent.py).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from app_creator.models import FlowKind


class WizardError(Exception):
    """Illegal transition or an operation the current step does not offer."""


class Step(str, Enum):
    SETUP = "setup"
    MODELS = "models"
    ENDPOINTS = "endpoints"
    UI_DESCRIPTION = "ui-description"
    UPLOAD = "upload"
    GENERATION = "generation"


FLOW_STEPS: Dict[FlowKind, Tuple[Step, ...]] = {
    FlowKind.BACKEND: (Step.SETUP, Step.MODELS, Step.ENDPOINTS, Step.GENERATION),
    FlowKind.FRONTEND: (Step.SETUP, Step.UI_DESCRIPTION, Step.GENERATION),
    FlowKind.ADD_BACKEND: (Step.UPLOAD, Step.SETUP, Step.GENERATION),
}

STEP_TITLES: Dict[FlowKind, Dict[Step, str]] = {
    FlowKind.BACKEND: {
        Step.SETUP: "Project Setup",
        Step.MODELS: "Data Models",
        Step.ENDPOINTS: "API Endpoints",
        Step.GENERATION: "Generate Code",
    },
    FlowKind.FRONTEND: {
        Step.SETUP: "Project Setup",
        Step.UI_DESCRIPTION: "Describe UI",
        Step.GENERATION: "Generate Code",
    },
    FlowKind.ADD_BACKEND: {
        Step.UPLOAD: "Upload Project",
        Step.SETUP: "Configure Backend",
        Step.GENERATION: "Generate Code",
    },
}


def flow_steps(flow: FlowKind) -> List[Dict[str, object]]:
    """Numbered step list for the step indicator."""
    titles = STEP_TITLES[flow]
    return [{"number": i + 1, "title": titles[s]} for i, s in enumerate(FLOW_STEPS[flow])]


@dataclass(frozen=True)
class WizardPosition:
    flow: FlowKind
    step: Step

    def __post_init__(self):
        if self.step not in FLOW_STEPS[self.flow]:
            raise WizardError(f"step '{self.step.value}' does not exist in the {self.flow.value} flow")

    @classmethod
    def start(cls, flow: FlowKind) -> "WizardPosition":
        return cls(flow, FLOW_STEPS[flow][0])

    @classmethod
    def terminal(cls, flow: FlowKind) -> "WizardPosition":
        return cls(flow, FLOW_STEPS[flow][-1])

    @property
    def steps(self) -> Tuple[Step, ...]:
        return FLOW_STEPS[self.flow]

    @property
    def number(self) -> int:
        return self.steps.index(self.step) + 1

    @property
    def is_terminal(self) -> bool:
        return self.step is Step.GENERATION

    @property
    def is_last_form_step(self) -> bool:
        return self.number == len(self.steps) - 1

    def advance(self) -> "WizardPosition":
        # clamps at the last form step; generation is entered via enter_generation()
        if self.is_terminal or self.is_last_form_step:
            return self
        return WizardPosition(self.flow, self.steps[self.number])

    def retreat(self) -> "WizardPosition":
        if self.number == 1:
            return self
        return WizardPosition(self.flow, self.steps[self.number - 2])

    def enter_generation(self) -> "WizardPosition":
        if not self.is_last_form_step:
            raise WizardError(
                f"generation can only be started from the last form step (currently on step {self.number})"
            )
        return WizardPosition.terminal(self.flow)
