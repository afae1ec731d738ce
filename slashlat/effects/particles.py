"""Particle bursts for sparks and explosions."""
from __future__ import annotations
from dataclasses import dataclass
import math
import random

import pygame


@dataclass
class Particle:
    """A single short-lived particle. Velocities are in px per second."""
    x: float
    y: float
    vx: float
    vy: float
    lifetime: float  # ms remaining
    max_lifetime: float
    color: tuple[int, int, int]
    size: float = 2.0
    gravity: float = 0.0  # px per second squared

    @property
    def alive(self) -> bool:
        return self.lifetime > 0

    @property
    def life_ratio(self) -> float:
        """1.0 when spawned, 0.0 when expired."""
        if self.max_lifetime <= 0:
            return 0.0
        return max(0.0, self.lifetime / self.max_lifetime)

    def update(self, dt: float) -> None:
        """Advance by dt seconds."""
        self.vy += self.gravity * dt
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.lifetime -= dt * 1000.0


def burst(
    x: float, y: float,
    count: int,
    colors: list[tuple[int, int, int]],
    speed_min: float,
    speed_max: float,
    lifetime: float,
    size: float = 2.0,
    gravity: float = 0.0
) -> list[Particle]:
    """Create particles flying out of (x, y) in random directions."""
    particles = []
    for _ in range(count):
        angle = random.uniform(0, math.pi * 2)
        speed = random.uniform(speed_min, speed_max)
        particles.append(Particle(
            x=x, y=y,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            lifetime=lifetime,
            max_lifetime=lifetime,
            color=random.choice(colors),
            size=size,
            gravity=gravity,
        ))
    return particles


class ParticleSystem:
    """Owns every live particle and advances them once per frame."""

    def __init__(self, max_particles: int = 1024) -> None:
        self._particles: list[Particle] = []
        self._max = max_particles

    @property
    def count(self) -> int:
        return len(self._particles)

    @property
    def particles(self) -> list[Particle]:
        return self._particles

    def add(self, particles: list[Particle]) -> None:
        """Track new particles, dropping any beyond the cap."""
        room = self._max - len(self._particles)
        if room > 0:
            self._particles.extend(particles[:room])

    def update(self, dt: float) -> None:
        """Advance all particles and discard expired ones."""
        for particle in self._particles:
            particle.update(dt)
        self._particles = [p for p in self._particles if p.alive]

    def clear(self) -> None:
        self._particles.clear()

    def draw(self, surface: pygame.Surface) -> None:
        """Draw particles as circles shrinking with age."""
        for particle in self._particles:
            radius = max(1, int(particle.size * particle.life_ratio))
            pygame.draw.circle(surface, particle.color, (int(particle.x), int(particle.y)), radius)
