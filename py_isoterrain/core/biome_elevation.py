"""
Biome elevation generation.

When a biome is selected on a field nobody has edited yet, a plausible
elevation field is synthesized from that biome's noise recipe:

1. Evaluate the recipe over normalized coordinates
2. Rescale relative to zero so the largest |raw| hits the target amplitude
3. Post-process (box blur, ridge power curve, water shift)
4. Quantize to a step derived from the biome's desired pixel jump

Generation always returns a new array; existing fields are never touched.
"""

import math
from typing import Optional, Union

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from scipy import ndimage

from ..config.biome_profiles import (
    BIOME_AMPLITUDE_BY_KEY,
    BIOME_UNIT_BY_KEY,
    ElevationProfile,
    get_profile_for_biome,
)
from ..config.terrain_settings import DEFAULT_TERRAIN_SETTINGS, TerrainSettings
from ..exceptions import ConcurrentGenerationRejected, ConfigurationError, GenerationFailure
from ..utils.random import MAX_SEED, resolve_seed
from .biome_recipes import RECIPE_INDEX, RecipeOptions, pick_recipe
from .elevation_scale import ElevationScale
from .grid import is_positive_int
from .height_field import HEIGHT_DTYPE, HeightField

logger = structlog.get_logger()

# Raw fields flatter than this are treated as featureless
DEGENERATE_RAW_AMPLITUDE = 1e-6

# Step comparisons tolerate float noise from jump_px / unit
_STEP_EPSILON = 1e-9


class GenerationOptions(BaseModel):
    """Caller-supplied generation overrides."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", allow_inf_nan=False, populate_by_name=True
    )

    seed: Optional[int] = Field(
        default=None, ge=0, le=MAX_SEED, description="32-bit seed; None derives one from the clock"
    )
    relief: Optional[float] = Field(default=None, description="Overall height magnitude multiplier")
    roughness: Optional[float] = Field(default=None, description="Noise complexity multiplier")
    water_bias: Optional[float] = Field(
        default=None, alias="waterBias", description="Pushes heights down (negative) or up"
    )
    orientation: Optional[float] = Field(
        default=None, description="Degrees for directional features such as dunes and shorelines"
    )
    elevation_unit: Optional[float] = Field(
        default=None, ge=0, description="Pixels per level used for quantization"
    )

    def recipe_options(self) -> RecipeOptions:
        return RecipeOptions(
            relief=self.relief,
            roughness=self.roughness,
            water_bias=self.water_bias,
            orientation=self.orientation,
        )


def is_all_default_height(grid, default_height: int = DEFAULT_TERRAIN_SETTINGS.default_height) -> bool:
    """True when grid is a non-empty 2D grid whose every cell equals default_height."""
    try:
        arr = np.asarray(grid)
    except (TypeError, ValueError):
        return False
    if arr.ndim != 2 or arr.size == 0:
        return False
    return bool(np.all(arr == default_height))


def box_blur(values: np.ndarray, radius: int, iterations: int) -> np.ndarray:
    """
    Mean filter over a (2r+1)^2 window, truncated at the field edges.

    Edge cells average only the in-bounds part of their window.
    """
    if radius <= 0 or iterations <= 0:
        return values
    size = 2 * radius + 1
    coverage = ndimage.uniform_filter(np.ones_like(values), size=size, mode="constant", cval=0.0)
    result = values
    for _ in range(iterations):
        result = ndimage.uniform_filter(result, size=size, mode="constant", cval=0.0) / coverage
    return result


def apply_ridge_power(values: np.ndarray, power: float) -> np.ndarray:
    """Sign-preserving power curve; the exponent is clamped to [0.5, 2]."""
    if not power or power == 1:
        return values
    p = max(0.5, min(2.0, power))
    return np.sign(values) * np.abs(values) ** p


class BiomeElevationGenerator:
    """
    Deterministic noise-driven elevation fields per biome.

    The generator holds no field state. Its only state is the re-entrancy
    flag: a generate() call made while another is running is rejected.
    """

    def __init__(
        self,
        settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS,
        elevation_scale: Optional[ElevationScale] = None,
    ):
        """
        Initialize the generator.

        Args:
            settings: Terrain settings providing height bounds and the base step
            elevation_scale: Runtime pixels-per-level used for quantization
        """
        self.settings = settings
        self.elevation_scale = elevation_scale or ElevationScale(settings=settings)
        self._is_generating = False

    @property
    def is_generating(self) -> bool:
        return self._is_generating

    def target_amplitude(self, biome_key: str, relief: Optional[float] = None) -> int:
        """
        Target max |height| in levels for a biome.

        The curated base amplitude is scaled by relief, bounded to
        [1, max_abs_level], narrowed into the biome's profile window and
        finally clamped to the global bound again.
        """
        max_abs_level = self.settings.max_abs_level
        base = BIOME_AMPLITUDE_BY_KEY.get(biome_key, _round_half_up(max_abs_level * 0.6))
        factor = relief if relief is not None else 1.0
        target = max(1, min(max_abs_level, _round_half_up(base * factor)))

        profile = get_profile_for_biome(biome_key)
        if profile.min_amp is not None:
            target = max(profile.min_amp, target)
        if profile.max_amp is not None:
            target = min(profile.max_amp, target)
        return int(min(max_abs_level, target))

    def quantization_step(self, profile: ElevationProfile, unit: Optional[float] = None) -> int:
        """
        Level step between neighboring quantized heights.

        jump_px / unit is rounded up to a multiple of the base height step
        (at least one step). Without jump_px the profile's quant_step is
        used, else the base step.
        """
        base_step = self.settings.height_step
        if unit is None or unit <= 0:
            unit = self.elevation_scale.effective_unit()

        if profile.jump_px is not None and profile.jump_px > 0 and unit > 0:
            levels_per_jump = max(profile.jump_px / unit, base_step)
            multiple = max(1, math.ceil(levels_per_jump / base_step - _STEP_EPSILON))
            return multiple * base_step
        if profile.quant_step is not None and profile.quant_step > 0:
            return int(profile.quant_step)
        return base_step

    def _resolve_options(self, options, overrides) -> GenerationOptions:
        if isinstance(options, GenerationOptions) and not overrides:
            return options
        values = {}
        if isinstance(options, GenerationOptions):
            values.update(options.model_dump(exclude_none=True))
        elif options is not None:
            values.update(options)
        values.update(overrides)
        try:
            return GenerationOptions.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid generation options: {e}") from e

    def generate(
        self,
        biome_key: str,
        rows: int,
        cols: int,
        options: Union[GenerationOptions, dict, None] = None,
        **overrides,
    ) -> np.ndarray:
        """
        Generate a new biome elevation field.

        Args:
            biome_key: Biome to shape; unknown keys use the grassland recipe
            rows: Field rows
            cols: Field columns
            options: GenerationOptions or a plain dict of option values
            **overrides: Individual option values, applied on top of options

        Returns:
            rows x cols integer array, every value a multiple of the
            quantization step inside the global height bound

        Raises:
            ConfigurationError: Invalid dimensions or options
            GenerationFailure: The recipe produced non-finite values
            ConcurrentGenerationRejected: Another generation is in flight
        """
        if self._is_generating:
            raise ConcurrentGenerationRejected(
                f"Generation of {biome_key!r} rejected: another generation is in progress"
            )
        if not is_positive_int(rows) or not is_positive_int(cols):
            raise ConfigurationError(
                f"Invalid field dimensions rows={rows!r}, cols={cols!r}. Must be positive integers."
            )
        opts = self._resolve_options(options, overrides)

        self._is_generating = True
        try:
            return self._generate(biome_key, int(rows), int(cols), opts)
        finally:
            self._is_generating = False

    def _generate(self, biome_key: str, rows: int, cols: int, opts: GenerationOptions) -> np.ndarray:
        seed = resolve_seed(opts.seed)
        recipe = pick_recipe(biome_key)
        profile = get_profile_for_biome(biome_key)

        ys, xs = np.mgrid[0:rows, 0:cols].astype(np.float64)
        nx = xs / (cols - 1) if cols > 1 else np.full_like(xs, 0.5)
        ny = ys / (rows - 1) if rows > 1 else np.full_like(ys, 0.5)

        try:
            with np.errstate(all="ignore"):
                raw = np.asarray(recipe(xs, ys, nx, ny, seed, opts.recipe_options()), dtype=np.float64)
            raw = np.broadcast_to(raw, (rows, cols))
        except (ArithmeticError, ValueError) as e:
            raise GenerationFailure(f"Recipe for {biome_key!r} failed: {e}") from e
        if not np.all(np.isfinite(raw)):
            raise GenerationFailure(f"Recipe for {biome_key!r} produced non-finite heights")

        # Scale relative to zero; never re-center on the mean
        max_abs_raw = float(np.max(np.abs(raw)))
        target = self.target_amplitude(biome_key, opts.relief)
        step = self.quantization_step(profile, opts.elevation_unit)

        if max_abs_raw <= DEGENERATE_RAW_AMPLITUDE:
            logger.warning(
                "Biome recipe produced a flat field, using default height",
                biome=biome_key,
                seed=seed,
                max_abs_raw=max_abs_raw,
            )
            return np.full((rows, cols), self.settings.default_height, dtype=HEIGHT_DTYPE)

        work = raw / max_abs_raw * target
        work = box_blur(work, profile.smooth_radius, profile.smooth_iterations)
        work = apply_ridge_power(work, profile.ridge_power)
        work = work + profile.water_shift

        # Round half up to the step, then clamp to step multiples inside the bound
        quantized = np.floor(work / step + 0.5) * step
        low = math.ceil(self.settings.min_height / step) * step
        high = math.floor(self.settings.max_height / step) * step
        field = np.clip(quantized, low, high).astype(HEIGHT_DTYPE)

        logger.info(
            "Biome elevation generated",
            biome=biome_key,
            rows=rows,
            cols=cols,
            seed=seed,
            target_amplitude=target,
            quantization_step=step,
            known_recipe=biome_key in RECIPE_INDEX,
        )
        return field

    def apply_if_flat(
        self,
        current: Union[HeightField, np.ndarray],
        biome_key: str,
        options: Union[GenerationOptions, dict, None] = None,
        **overrides,
    ) -> np.ndarray:
        """
        Generate only when the current field is pristine.

        Returns a fresh generation if every cell is at the default height,
        otherwise an unmodified copy of the current heights. Manual edits
        are never overwritten.
        """
        if isinstance(current, HeightField):
            grid = current.working
            default_height = current.default_height
        else:
            grid = np.asarray(current)
            default_height = self.settings.default_height
        if grid.ndim != 2 or grid.size == 0:
            raise ConfigurationError("Current heights must be a non-empty 2D grid")

        if is_all_default_height(grid, default_height):
            return self.generate(biome_key, grid.shape[0], grid.shape[1], options, **overrides)
        return np.array(grid, copy=True)

    def get_elevation_scale_hint(self, biome_key: str) -> float:
        """Recommended pixels per level for a biome; advisory only."""
        return float(BIOME_UNIT_BY_KEY.get(biome_key) or self.settings.elevation_unit)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
