"""
Sentinel Zone
=============

Bounded Context: Restricted-region intrusion detection for video analytics.

Design Philosophy:
- Separation of Concerns: Geometry, ROI, Analytics, Rendering separated
- Geometry is pure and deterministic: the same input always classifies
  the same way
- The loop is scheduler-agnostic: any driver calls tick()

Architecture:

    sentinel_zone/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── shapes.py      # Point, Box
    │   ├── primitives.py  # point_in_polygon, segments_intersect
    │   ├── intersection.py# box_intersects_polygon
    │   └── detector.py    # IntrusionDetector (batch classification)
    │
    ├── roi.py             # RegionOfInterest, ROIModel (normalized region)
    ├── analytics/         # FrameEvaluation, IntrusionState (observable)
    ├── rendering/         # IntrusionVisualizer
    ├── logging/           # Structured JSON logging
    └── pipeline.py        # FrameEvaluationLoop, IntervalTicker, PipelineBuilder

Usage:

    from sentinel_zone import Box, box_intersects_polygon, RegionOfInterest

    roi = RegionOfInterest.default()
    polygon = roi.scale(1000, 1000)
    box_intersects_polygon(Box(x=0, y=0, width=250, height=250), polygon)  # True

    from sentinel_zone import PipelineBuilder

    loop = (
        PipelineBuilder()
        .with_frame_source(source)
        .with_detector(detector)
        .add_sink(lambda evaluation: print(evaluation))
        .build()
    )
    loop.tick()
"""

# Geometry Layer (immutable, stateless)
from sentinel_zone.geometry import (
    Point,
    Box,
    point_in_polygon,
    segments_intersect,
    IntersectionPath,
    intersection_path,
    box_intersects_polygon,
    DetectedObject,
    IntrusionDetector,
    PERSON_CLASS,
)

# ROI Model
from sentinel_zone.roi import RegionOfInterest, ROIModel, scale_roi, DEFAULT_ROI_VERTICES

# Collaborator interfaces
from sentinel_zone.interfaces import Frame, FrameSource, Detector, EvaluationSink

# Analytics Layer (stateful)
from sentinel_zone.analytics import (
    FrameEvaluation,
    ObjectClassification,
    IntrusionState,
    IntrusionStats,
)

# Rendering Layer (stateless)
from sentinel_zone.rendering import IntrusionVisualizer

# Pipeline (orchestration)
from sentinel_zone.pipeline import (
    LoopState,
    evaluate_frame,
    FrameEvaluationLoop,
    IntervalTicker,
    PipelineBuilder,
)

__all__ = [
    # Geometry
    "Point",
    "Box",
    "point_in_polygon",
    "segments_intersect",
    "IntersectionPath",
    "intersection_path",
    "box_intersects_polygon",
    "DetectedObject",
    "IntrusionDetector",
    "PERSON_CLASS",
    # ROI
    "RegionOfInterest",
    "ROIModel",
    "scale_roi",
    "DEFAULT_ROI_VERTICES",
    # Interfaces
    "Frame",
    "FrameSource",
    "Detector",
    "EvaluationSink",
    # Analytics
    "FrameEvaluation",
    "ObjectClassification",
    "IntrusionState",
    "IntrusionStats",
    # Rendering
    "IntrusionVisualizer",
    # Pipeline
    "LoopState",
    "evaluate_frame",
    "FrameEvaluationLoop",
    "IntervalTicker",
    "PipelineBuilder",
]

__version__ = "1.0.0"
