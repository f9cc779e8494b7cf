"""YAML schema validation for scene files.

A scene file describes a whole document declaratively: output kind,
registered images, and pages of shapes.  It is validated with pydantic
for fail-fast errors with actionable messages (offending keys, expected
types).  Numeric *ranges* are deliberately not validated here: colors,
geometry and rotation are clamped by the shapes themselves.

Schema (scene.v1)::

    schema: scene.v1
    kind: eps                    # optional, overrides settings
    bounding_box: [500, 300]     # optional, EPS only
    images:
      - path: logo.png           # relative to the scene file
    pages:
      - width: 500
        height: 300
        shapes:
          - type: rect
            x: 50
            y: 100
            width: 400
            height: 100
            fill: {cmyk: [0.5, 1.0, 0.5, 0.0]}
            stroke: {width: 2, rgb: [0, 0, 0]}
            rotate: 45
            scale: [1.5, 1.0]
            origin: top_left
          - type: line
            x: 100
            y: 100
            length: 100
            origin: left
          - type: image
            source: logo.png
            x: 0
            y: 0
            width: 200
            height: 100
            fit: crop

Usage:
    from pslib.utils import validators
    scene = validators.load_scene_file("poster.yaml")
"""

from pathlib import Path
from typing import Annotated, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# COLORS
# ============================================================================

class ColorSpec(BaseModel):
    """Exactly one of ``rgb`` or ``cmyk``."""
    model_config = ConfigDict(extra="forbid")

    rgb: Optional[Tuple[float, float, float]] = Field(None, description="Red, green, blue")
    cmyk: Optional[Tuple[float, float, float, float]] = Field(None, description="Cyan, magenta, yellow, black")

    @model_validator(mode='after')
    def validate_one_space(self) -> 'ColorSpec':
        if (self.rgb is None) == (self.cmyk is None):
            raise ValueError("Color must set exactly one of 'rgb' or 'cmyk'")
        return self


class StrokeSpec(ColorSpec):
    """Stroke paint plus line width (pt)."""
    width: float = Field(1.0, description="Line width in points")

    @model_validator(mode='before')
    @classmethod
    def default_black(cls, data):
        if isinstance(data, dict) and "rgb" not in data and "cmyk" not in data:
            data = {**data, "rgb": (0.0, 0.0, 0.0)}
        return data


# ============================================================================
# SHAPES
# ============================================================================

class _ShapeBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    x: float = Field(..., description="X position (pt)")
    y: float = Field(..., description="Y position (pt)")
    rotate: Optional[float] = Field(None, description="Rotation in degrees, counter-clockwise")
    scale: Optional[Tuple[float, float]] = Field(None, description="Scale factors (sx, sy)")


class RectSpec(_ShapeBase):
    type: Literal["rect"]
    width: float
    height: float
    fill: Optional[ColorSpec] = None
    stroke: Optional[StrokeSpec] = None
    origin: Literal["center", "top_left", "top_right", "bottom_left", "bottom_right"] = "center"


class LineSpec(_ShapeBase):
    type: Literal["line"]
    length: float
    stroke: Optional[StrokeSpec] = None
    origin: Literal["left", "center", "right"] = "center"


class ImageSpec(_ShapeBase):
    type: Literal["image"]
    source: str = Field(..., description="Registered image file name")
    width: float
    height: float
    fit: Literal["contain", "stretch", "stretch_horizontal", "stretch_vertical", "crop"] = "contain"
    origin: Literal["center", "top_left", "top_right", "bottom_left", "bottom_right"] = "center"


ShapeSpec = Annotated[Union[RectSpec, LineSpec, ImageSpec], Field(discriminator="type")]


# ============================================================================
# PAGES / SCENE
# ============================================================================

class PageSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    width: int = Field(..., description="Page width (pt)")
    height: int = Field(..., description="Page height (pt)")
    shapes: List[ShapeSpec] = Field(default_factory=list)


class ImageSource(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="Image file, relative to the scene file")


class SceneV1(BaseModel):
    """Complete scene (scene.v1 schema)."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_version: str = Field("scene.v1", alias="schema")
    kind: Optional[Literal["ps", "eps"]] = None
    bounding_box: Optional[Tuple[int, int]] = None
    images: List[ImageSource] = Field(default_factory=list)
    pages: List[PageSpec] = Field(..., min_length=1)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "scene.v1":
            raise ValueError(f"Expected schema 'scene.v1', got '{v}'")
        return v

    @model_validator(mode='after')
    def validate_eps_single_page(self) -> 'SceneV1':
        if self.kind == "eps" and len(self.pages) != 1:
            raise ValueError(f"EPS scenes must have exactly 1 page, got {len(self.pages)}")
        return self


# ============================================================================
# PUBLIC API
# ============================================================================

def load_scene_file(path: Union[str, Path]) -> SceneV1:
    """Load and validate a scene file.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scene file not found: {path}")

    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ValueError(str(e)) from e
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {path} must contain a mapping")
    try:
        return SceneV1.model_validate(data)
    except Exception as e:
        raise ValueError(f"Scene validation failed at {path}: {e}") from e
