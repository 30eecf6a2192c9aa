"""Analysis composition, seed recipes, interpretation, scoring and goal wiring."""

from .analyzer import ProjectAnalyzer, ProjectAnalyzerBuilder, StackSupport, analyzer_builder
from .compositor import AnalysisCompositor
from .engine import InterpretationEngine
from .interpretation import (
    AutofixRegistration,
    CodeInspectionRegistration,
    Interpretation,
    InterpretationReason,
    Interpreter,
    PushMessage,
)
from .models import (
    Analysis,
    AnalysisOptions,
    Classification,
    Dependency,
    Fingerprint,
    TechnologyClassification,
    TechnologyElement,
)
from .phases import DeliveryGraph, GoalGraphBuilder, delivery_graph
from .registration import ConditionalRegistry, Conditional, Unconditional, conditional
from .scanner import PhasedTechnologyScanner, presence_tested_element_scanner
from .scoring import Score, ScoreAggregator, weighted_composite_score
from .seed import (
    CodeTransform,
    NamedParameter,
    SeedAnalysis,
    SeedRecipeComposer,
    TransformRecipe,
    TransformRecipeRegistration,
)
from .utils import all_technology_elements, is_usable_as_seed

__all__ = [
    "ProjectAnalyzer",
    "ProjectAnalyzerBuilder",
    "StackSupport",
    "analyzer_builder",
    "AnalysisCompositor",
    "InterpretationEngine",
    "AutofixRegistration",
    "CodeInspectionRegistration",
    "Interpretation",
    "InterpretationReason",
    "Interpreter",
    "PushMessage",
    "Analysis",
    "AnalysisOptions",
    "Classification",
    "Dependency",
    "Fingerprint",
    "TechnologyClassification",
    "TechnologyElement",
    "DeliveryGraph",
    "GoalGraphBuilder",
    "delivery_graph",
    "ConditionalRegistry",
    "Conditional",
    "Unconditional",
    "conditional",
    "PhasedTechnologyScanner",
    "presence_tested_element_scanner",
    "Score",
    "ScoreAggregator",
    "weighted_composite_score",
    "CodeTransform",
    "NamedParameter",
    "SeedAnalysis",
    "SeedRecipeComposer",
    "TransformRecipe",
    "TransformRecipeRegistration",
    "all_technology_elements",
    "is_usable_as_seed",
]
