"""
Intrusion Visualizer Module
===========================

Pure visualization layer for the region and per-person classifications.

Design:
- Stateless rendering (no business logic, reads FrameEvaluation only)
- Configurable styles
- Uses supervision drawing utilities

Drawing:
- Region: green fill/outline when secure, red when intruded
- Person boxes: red "ALERT!" when touching the region, green "Safe" otherwise
- Status banner: "INTRUSION" / "SECURE"

Dependencies:
- supervision (draw utilities, Color, Point, annotators)
- numpy (arrays)
"""

from typing import List, Optional

import numpy as np
import supervision as sv

from sentinel_zone.analytics.evaluation import FrameEvaluation, ObjectClassification


class IntrusionVisualizer:
    """
    Stateless visualizer for intrusion evaluations.

    Usage:
        visualizer = IntrusionVisualizer(thickness=4)

        # Annotate a frame
        frame = visualizer.annotate(frame, evaluation)

        # Overlay only (no video pixels available)
        overlay = visualizer.overlay(evaluation)
    """

    def __init__(
        self,
        safe_color: sv.Color = sv.Color(r=0, g=255, b=0),
        alert_color: sv.Color = sv.Color(r=255, g=0, b=0),
        text_color: sv.Color = sv.Color(r=255, g=255, b=255),
        text_background_color: sv.Color = sv.Color(r=0, g=0, b=0),
        thickness: int = 4,
        roi_thickness: int = 2,
        text_scale: float = 0.6,
        text_thickness: int = 2,
        text_padding: int = 10,
        safe_opacity: float = 0.1,
        alert_opacity: float = 0.2,
        show_status: bool = True,
    ):
        """
        Initialize visualizer with style configuration.

        Args:
            safe_color: Color for non-intersecting boxes and a secure region
            alert_color: Color for intersecting boxes and an intruded region
            text_color: Color for text labels
            text_background_color: Background color for the status banner
            thickness: Box line thickness
            roi_thickness: Region outline thickness
            text_scale: Scale factor for text
            text_thickness: Thickness for text
            text_padding: Padding for text background
            safe_opacity: Region fill opacity while secure (0-1)
            alert_opacity: Region fill opacity while intruded (0-1)
            show_status: Draw the INTRUSION / SECURE banner
        """
        self.safe_color = safe_color
        self.alert_color = alert_color
        self.text_color = text_color
        self.text_background_color = text_background_color
        self.thickness = thickness
        self.roi_thickness = roi_thickness
        self.text_scale = text_scale
        self.text_thickness = text_thickness
        self.text_padding = text_padding
        self.safe_opacity = safe_opacity
        self.alert_opacity = alert_opacity
        self.show_status = show_status

    def annotate(self, scene: np.ndarray, evaluation: FrameEvaluation) -> np.ndarray:
        """
        Draw region, boxes and status on a copy of scene.

        Args:
            scene: Frame pixels (HxWx3, BGR)
            evaluation: Evaluation of that frame

        Returns:
            Annotated copy of the frame
        """
        frame = scene.copy()
        frame = self.draw_roi(frame, evaluation)
        frame = self.draw_classifications(frame, list(evaluation.classifications))
        if self.show_status:
            frame = self.draw_status(frame, evaluation.intrusion)
        return frame

    def overlay(self, evaluation: FrameEvaluation) -> np.ndarray:
        """Annotate a black canvas of the evaluated frame's size."""
        width, height = evaluation.frame_wh
        canvas = np.zeros((height, width, 3), dtype=np.uint8)
        return self.annotate(canvas, evaluation)

    def draw_roi(self, frame: np.ndarray, evaluation: FrameEvaluation) -> np.ndarray:
        """Fill and outline the scaled region."""
        # int32 for cv2 compatibility
        polygon = np.array(evaluation.scaled_roi, dtype=np.float64).round().astype(np.int32)
        color = self.alert_color if evaluation.intrusion else self.safe_color
        opacity = self.alert_opacity if evaluation.intrusion else self.safe_opacity

        frame = sv.draw_filled_polygon(
            scene=frame,
            polygon=polygon,
            color=color,
            opacity=opacity,
        )
        frame = sv.draw_polygon(
            scene=frame,
            polygon=polygon,
            color=color,
            thickness=self.roi_thickness,
        )
        return frame

    def draw_classifications(
        self,
        frame: np.ndarray,
        classifications: List[ObjectClassification],
    ) -> np.ndarray:
        """Draw each person box in alert or safe style."""
        alerts = [c for c in classifications if c.intersecting]
        safe = [c for c in classifications if not c.intersecting]

        frame = self._draw_group(frame, alerts, self.alert_color)
        frame = self._draw_group(frame, safe, self.safe_color)
        return frame

    def draw_status(self, frame: np.ndarray, intrusion: bool) -> np.ndarray:
        """Draw the frame-level status banner in the top-left corner."""
        text = "INTRUSION" if intrusion else "SECURE"
        background = self.alert_color if intrusion else self.text_background_color

        return sv.draw_text(
            scene=frame,
            text=text,
            text_anchor=sv.Point(x=80, y=30),
            text_color=self.text_color,
            text_scale=self.text_scale,
            text_thickness=self.text_thickness,
            text_padding=self.text_padding,
            background_color=background,
        )

    def _draw_group(
        self,
        frame: np.ndarray,
        group: List[ObjectClassification],
        color: sv.Color,
    ) -> np.ndarray:
        if not group:
            return frame

        detections = to_detections(group)
        labels = [c.label for c in group]

        # Single color per group: resolve by index, detections carry no class_id
        box_annotator = sv.BoxAnnotator(
            color=color,
            thickness=self.thickness,
            color_lookup=sv.ColorLookup.INDEX,
        )
        label_annotator = sv.LabelAnnotator(
            color=color,
            text_color=self.text_color,
            text_scale=self.text_scale,
            text_thickness=self.text_thickness,
            text_padding=self.text_padding,
            color_lookup=sv.ColorLookup.INDEX,
        )

        frame = box_annotator.annotate(scene=frame, detections=detections)
        frame = label_annotator.annotate(scene=frame, detections=detections, labels=labels)
        return frame


def to_detections(classifications: List[ObjectClassification]) -> sv.Detections:
    """Convert classifications to supervision Detections (xyxy boxes)."""
    if not classifications:
        return sv.Detections.empty()

    xyxy = np.array([c.box.xyxy for c in classifications], dtype=np.float32)
    confidence: Optional[np.ndarray] = None
    if all(c.detected_object.confidence is not None for c in classifications):
        confidence = np.array(
            [c.detected_object.confidence for c in classifications], dtype=np.float32
        )

    return sv.Detections(xyxy=xyxy, confidence=confidence)
