import json
import logging
import time
from pathlib import Path
from typing import Optional

from autopath.domain.parameters import SimulationParameters
from autopath.kernel.simulation_kernel import SimulationKernel

logger = logging.getLogger(__name__)

def load_parameters(config_path: Optional[str]) -> SimulationParameters:
    if not config_path:
        return SimulationParameters()
    return SimulationParameters.model_validate_json(Path(config_path).read_text())

def run_headless_experiment(config_path: Optional[str], output_path: str, max_ticks: int = 20000) -> dict:
    """Drives one trip to completion (or max_ticks) and writes a per-tick JSON trace.

    A sample is recorded on every environment tick and once at the end.
    """
    params = load_parameters(config_path)
    kernel = SimulationKernel(params=params)
    kernel.initialize()
    kernel.start()

    samples = []
    start_time = time.time()
    ticks = 0
    while ticks < max_ticks:
        kernel.run_tick()
        ticks += 1
        if not kernel.state.playing:
            break
        if ticks % params.environment_every == 0:
            metrics = kernel.get_metrics()
            samples.append({
                "tick": kernel.state.tick_id,
                "elapsedTime": round(metrics.elapsedTime, 3),
                "rerouteCount": metrics.rerouteCount,
                "distanceTraveled": round(metrics.distanceTraveled, 3),
                "waitingForLight": kernel.state.waiting_for_light,
            })

    metrics = kernel.get_metrics()
    result = {
        "seed": params.seed,
        "penaltyWeight": params.penalty_weight,
        "ticks": ticks,
        "arrived": kernel.state.arrived,
        "failed": kernel.state.failed,
        "route": kernel.get_route().model_dump(),
        "metrics": metrics.model_dump(mode="json"),
        "samples": samples,
        "log": [entry.model_dump(mode="json") for entry in kernel.get_logs()],
    }

    end_time = time.time()
    logger.info("Experiment finished in %.4fs (%d ticks)", end_time - start_time, ticks)

    with open(output_path, 'w') as f:
        json.dump(result, f, indent=2)
    return result

if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) > 2:
        run_headless_experiment(sys.argv[1], sys.argv[2])
    else:
        print("Usage: python -m autopath.experiments.run_experiment <config.json> <output.json>")
