"""
Seeded noise primitives for biome elevation.

Every function is pure and vectorized: coordinates may be Python floats or
NumPy arrays of any shape, and the same (coordinates, seed) always give
the same values. There is no hidden random state.
"""

import math
from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


def hash_2d(x: ArrayLike, y: ArrayLike, seed: float = 1337) -> ArrayLike:
    """Hash lattice coordinates into [0, 1) using the fract(sin) trick."""
    v = np.sin(x * 127.1 + y * 311.7 + seed * 0.73) * 43758.5453
    return v - np.floor(v)


def smooth_noise(x: ArrayLike, y: ArrayLike, seed: float = 1337) -> ArrayLike:
    """
    Value noise: smoothstep-interpolated hash values at the four
    surrounding lattice corners.
    """
    x0 = np.floor(x)
    y0 = np.floor(y)
    xf = x - x0
    yf = y - y0

    v00 = hash_2d(x0, y0, seed)
    v10 = hash_2d(x0 + 1, y0, seed)
    v01 = hash_2d(x0, y0 + 1, seed)
    v11 = hash_2d(x0 + 1, y0 + 1, seed)

    u = xf * xf * (3 - 2 * xf)
    v = yf * yf * (3 - 2 * yf)
    return (v00 * (1 - u) + v10 * u) * (1 - v) + (v01 * (1 - u) + v11 * u) * v


def fbm(
    x: ArrayLike,
    y: ArrayLike,
    seed: float = 1337,
    octaves: int = 4,
    lacunarity: float = 2.0,
    gain: float = 0.5,
) -> ArrayLike:
    """
    Fractal Brownian motion over smooth_noise.

    Args:
        x, y: Sample coordinates
        seed: Base seed; octave i uses seed + 37 * i
        octaves: Number of layers
        lacunarity: Frequency multiplier per octave
        gain: Amplitude multiplier per octave

    Returns:
        Values roughly in [0, 1]
    """
    freq = 1.0
    amp = 0.5
    total = 0.0
    for i in range(octaves):
        total = total + amp * smooth_noise(x * freq, y * freq, seed + i * 37)
        freq *= lacunarity
        amp *= gain
    return total


def ridge(x: ArrayLike, y: ArrayLike, seed: float = 1337, octaves: int = 5) -> ArrayLike:
    """Ridged multifractal: peaked 1 - |2n - 1| layers with halving weights, normalized to ~[0, 1]."""
    total = 0.0
    weight = 1.0
    freq = 0.9
    for i in range(octaves):
        n = smooth_noise(x * freq, y * freq, seed + i * 101)
        total = total + (1.0 - np.abs(2.0 * n - 1.0)) * weight
        weight *= 0.5
        freq *= 2.15
    return total / (2 - 0.5 ** octaves)


def clamp(v: ArrayLike, lo: float, hi: float) -> ArrayLike:
    return np.clip(v, lo, hi)


def mix(a: ArrayLike, b: ArrayLike, t: ArrayLike) -> ArrayLike:
    return a + (b - a) * t


def radial(
    nx: ArrayLike,
    ny: ArrayLike,
    seed: float,
    invert: bool = False,
    scale: float = 1.0,
    bump: float = 0.0,
) -> ArrayLike:
    """
    Dome centered on the field (or a bowl when invert is set) with fbm wobble.

    Uses normalized coordinates; distance is measured from (0.5, 0.5).
    """
    d = np.sqrt((nx - 0.5) ** 2 + (ny - 0.5) ** 2)
    base = d if invert else 1.0 - d
    n = fbm(nx * 4.0, ny * 4.0, seed, 4, 2.0, 0.5) - 0.5
    return base * scale + n * 0.4 + bump


def cliff_band(
    nx: ArrayLike, ny: ArrayLike, seed: float, angle_deg: float = 0.0, width: float = 0.08
) -> ArrayLike:
    """Sharp tanh step across the field along a rotated axis, in about [-1, 1]."""
    th = math.radians(angle_deg)
    u = nx * math.cos(th) + ny * math.sin(th)
    edge = np.tanh((u - 0.5) / width)
    noise = (fbm(nx * 8, ny * 8, seed, 3, 2.1, 0.5) - 0.5) * 0.2
    return edge + noise


def dune_wave(
    nx: ArrayLike, ny: ArrayLike, seed: float, angle_deg: float, frequency: float = 18.0
) -> ArrayLike:
    """Parallel sine crests travelling along angle_deg."""
    th = math.radians(angle_deg)
    return np.sin((nx * math.cos(th) + ny * math.sin(th)) * frequency + seed * 0.001)


def meander_channel(nx: ArrayLike, ny: ArrayLike, seed: float, angle_rad: float) -> ArrayLike:
    """
    Winding channel mask along a rotated axis.

    Returns:
        1 at the channel center falling toward 0 away from it
    """
    u = nx * math.cos(angle_rad) + ny * math.sin(angle_rad)
    v = -nx * math.sin(angle_rad) + ny * math.cos(angle_rad)
    meander = np.sin(u * 6.0 + np.sin(v * 2.0 + seed * 0.01))
    return np.exp(-((meander * 1.2) ** 2) * 2.5)
