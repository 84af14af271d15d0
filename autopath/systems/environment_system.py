import math
import random
from typing import Optional
from pydantic import BaseModel

from autopath.domain import config
from autopath.domain.graph import RoadNetwork

class EnvironmentReport(BaseModel):
    lights_flipped: int = 0
    edges_perturbed: int = 0
    slowdowns: int = 0

class EnvironmentSystem:
    """Ambient traffic dynamics: speed fluctuation, unannounced slowdowns and light toggles.

    Edges flagged as incidents keep their forced speed. All draws come from the
    injected generator so a seeded run is reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 speed_noise: float = config.SPEED_NOISE,
                 slowdown_probability: float = config.SLOWDOWN_PROBABILITY,
                 light_flip_probability: float = config.LIGHT_FLIP_PROBABILITY):
        self.rng = rng or random.Random()
        self.speed_noise = speed_noise
        self.slowdown_probability = slowdown_probability
        self.light_flip_probability = light_flip_probability

    def update(self, network: RoadNetwork) -> EnvironmentReport:
        report = EnvironmentReport()

        for node in network.nodes():
            if self.rng.random() < self.light_flip_probability:
                node.toggle_light()
                report.lights_flipped += 1

        for edge in network.edges():
            if edge.incident:
                continue
            flux = self.rng.uniform(-self.speed_noise, self.speed_noise)
            new_speed = float(math.floor(edge.base_speed + flux))
            if self.rng.random() < self.slowdown_probability:
                new_speed = max(config.MIN_SPEED, edge.base_speed * config.SLOWDOWN_FACTOR)
                report.slowdowns += 1
            edge.set_speed(new_speed)
            report.edges_perturbed += 1

        return report
