#!/usr/bin/env python3
"""
Demo script showing biome elevation generation and brush editing.
"""

import asyncio

import numpy as np
import matplotlib.pyplot as plt
from py_isoterrain.config import list_biome_keys
from py_isoterrain.core import AsyncioFrameScheduler, SchedulerState, TerrainCoordinator
from py_isoterrain.utils.logging import configure_logging


class CountingRenderer:
    """Renderer that only counts redraws."""

    def __init__(self):
        self.redraws = 0

    def redraw_cell(self, update):
        self.redraws += 1


async def wait_for_redraws(coordinator: TerrainCoordinator):
    while len(coordinator.scheduler) or coordinator.scheduler.state != SchedulerState.IDLE:
        await asyncio.sleep(0.01)


async def run_demo():
    rows, cols = 24, 24
    biomes_to_demo = ['mountain', 'hills', 'wetlands', 'sandDunes']

    plt.figure(figsize=(12, 12))

    for i, biome in enumerate(biomes_to_demo, 1):
        print(f"\nGenerating {biome} elevation...")

        renderer = CountingRenderer()
        coordinator = TerrainCoordinator(renderer, AsyncioFrameScheduler(), rows, cols, biome_seed=42)
        coordinator.apply_biome_scale_hint(biome)
        coordinator.generate_biome_elevation(biome)
        await wait_for_redraws(coordinator)

        heights = coordinator.field.working
        print(f"  Range: {heights.min()} .. {heights.max()}")
        print(f"  Average height: {np.mean(heights):.2f}")
        print(f"  Redraws: {renderer.redraws}")

        # Carve a short ridge by hand on top of the generated field
        coordinator.enable_terrain_mode()
        coordinator.set_brush_size(3)
        for x in range(4, 12):
            coordinator.paint_at(x, 12)
        coordinator.end_stroke()
        coordinator.disable_terrain_mode()
        await wait_for_redraws(coordinator)

        plt.subplot(2, 2, i)
        plt.imshow(coordinator.field.base, cmap='terrain', vmin=-10, vmax=10)
        plt.colorbar(label='Height')
        plt.title(f'{biome} (unit {coordinator.elevation_scale.unit:g}px)')
        plt.xlabel('X')
        plt.ylabel('Y')

    plt.tight_layout()
    plt.savefig('biome_elevation_examples.png', dpi=150)
    print("\nSaved visualization to biome_elevation_examples.png")

    print("\nAvailable biomes:")
    for key in list_biome_keys():
        print(f"  - {key}")


def main():
    """Demonstrate biome elevation generation."""
    print("Py-Isoterrain Biome Elevation Demo")
    print("=" * 40)
    configure_logging("INFO", "console")
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
