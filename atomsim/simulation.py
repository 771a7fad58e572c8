"""
Tick pipeline and the Simulation driver.

`step` is a pure function of (state, dt, rng): it works on a deep copy and
returns the committed result. `Simulation` owns the committed state, the
seeded random source and the queue of external commands, which are only
applied between ticks.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Tuple
from collections import deque
import threading
import time
import logging

import numpy as np

from . import commands
from .bonds import BondLifecycleEngine
from .chemistry import ChemistryEngine
from .integrators import Integrator, create_integrator
from .metrics import TickMetrics
from .photons import PhotonInteraction
from .physics import ForceIntegrator
from .registry import Registry
from .state import SimulationState
from .constants import CONTAINER_SIZE, MAX_FRAME_DT

logger = logging.getLogger(__name__)


def clamp_dt(frame_delta: float, time_scale: float = 1.0, max_dt: float = MAX_FRAME_DT) -> float:
    """Simulated seconds for one frame: the external delta clamped, then scaled."""
    return min(float(frame_delta), max_dt) * float(time_scale)


class TickReport:
    """What happened during one tick."""

    __slots__ = ("formed", "broken", "struck", "dropped")

    def __init__(self, formed: int = 0, broken: int = 0, struck: int = 0, dropped: int = 0):
        self.formed = formed
        self.broken = broken
        self.struck = struck
        self.dropped = dropped

    def __repr__(self) -> str:
        return (f"<TickReport formed={self.formed} broken={self.broken} "
                f"struck={self.struck} dropped={self.dropped}>")


class Pipeline:
    """
    The engines one tick runs through, in order.
    """

    def __init__(self,
                 forces: Optional[ForceIntegrator] = None,
                 bonds: Optional[BondLifecycleEngine] = None,
                 chemistry: Optional[ChemistryEngine] = None,
                 photons: Optional[PhotonInteraction] = None,
                 integrator: Optional[Integrator] = None):
        self.forces = forces or ForceIntegrator()
        self.bonds = bonds or BondLifecycleEngine()
        self.chemistry = chemistry or ChemistryEngine()
        self.photons = photons or PhotonInteraction()
        self.integrator = integrator or create_integrator("semi_implicit_euler", CONTAINER_SIZE)

    def run(self, state: SimulationState, dt: float,
            rng: np.random.Generator) -> Tuple[SimulationState, TickReport]:
        """
        One tick: forces, bond lifecycle, cooldown-gated formation, photon
        collisions, integration. Returns the new state and a report.
        """
        if not state.atoms and not state.photons:
            return state.copy(bonds=[]), TickReport(dropped=len(state.bonds))

        work = state.copy()
        registry = Registry(work.atoms, work.bonds)
        report = TickReport(dropped=len(registry.rejected))

        forces = self.forces.compute(registry, work.temperature, work.magnetic_field, work.vortex)

        _, report.broken = self.bonds.evaluate(registry, forces, work.temperature, rng)

        fires, work.chemistry_cooldown = self.chemistry.tick(work.chemistry_cooldown, dt)
        if fires:
            report.formed = len(self.chemistry.form_bonds(registry, work.temperature))

        work.photons, report.struck = self.photons.resolve(work.photons, registry, forces, dt)

        self.integrator.integrate(work.atoms, forces, work.temperature, dt, rng)

        work.bonds = registry.bonds
        work.time += dt
        work.frame += 1
        return work, report


_DEFAULT_PIPELINE = Pipeline()


def step(state: SimulationState, dt: float,
         rng: Optional[np.random.Generator] = None,
         pipeline: Optional[Pipeline] = None) -> SimulationState:
    """
    Advance `state` by `dt` simulated seconds. The input is never mutated.
    """
    rng = rng if rng is not None else np.random.default_rng()
    new_state, _ = (pipeline or _DEFAULT_PIPELINE).run(state, dt, rng)
    return new_state


# -----------------------
# Driver
# -----------------------
class Simulation:
    """
    Owns the committed state and applies queued commands at tick boundaries.

    Usage:
        sim = Simulation(build_scenario("water"), seed=7)
        sim.fire_photon()
        sim.run(n_steps=600)
        print(sim.snapshot().summary())
    """

    def __init__(self,
                 state: Optional[SimulationState] = None,
                 seed: Optional[int] = None,
                 pipeline: Optional[Pipeline] = None,
                 max_history: int = 1000):
        self.seed = int(seed) if seed is not None else None
        self.rng = np.random.default_rng(self.seed)
        self.pipeline = pipeline or Pipeline()
        self.metrics = TickMetrics(max_history=max_history)
        self.last_report = TickReport()

        self._state = state.copy() if state is not None else SimulationState()
        self._lock = threading.Lock()
        self._pending: deque = deque()
        self._thread: Optional[threading.Thread] = None
        self._looping = False

        logger.info(f"Simulation initialized: atoms={len(self._state.atoms)} "
                    f"bonds={len(self._state.bonds)} seed={self.seed}")

    # -----------------------
    # Read accessors
    # -----------------------
    @property
    def state(self) -> SimulationState:
        """The committed state. Treat as read-only; use snapshot() for a private copy."""
        return self._state

    def snapshot(self) -> SimulationState:
        return self._state.copy()

    def phases(self) -> Dict[str, str]:
        return self._state.phases()

    @property
    def pending_commands(self) -> int:
        with self._lock:
            return len(self._pending)

    # -----------------------
    # Command queue
    # -----------------------
    def submit(self, name: str, func: Callable[..., SimulationState], *args, **kwargs) -> None:
        """Queue `func(state, *args, **kwargs)` for the next tick boundary."""
        with self._lock:
            self._pending.append((name, func, args, kwargs))

    def apply_pending(self) -> int:
        """Apply queued commands in submission order. Returns how many succeeded."""
        with self._lock:
            batch = list(self._pending)
            self._pending.clear()
        applied = 0
        for name, func, args, kwargs in batch:
            try:
                self._state = func(self._state, *args, **kwargs)
                applied += 1
            except ValueError as e:
                logger.warning(f"Rejected command {name}: {e}")
        return applied

    def spawn_atom(self, kind: str, position=(0.0, 0.0, 0.0)) -> None:
        self.submit("spawn_atom", commands.spawn_atom, kind, position, rng=self.rng)

    def spawn_molecule(self, template_key: str, origin=(0.0, 0.0, 0.0)) -> None:
        self.submit("spawn_molecule", commands.spawn_molecule, template_key, origin, rng=self.rng)

    def fire_photon(self, origin=None, direction=(1.0, 0.0, 0.0), energy: Optional[float] = None) -> None:
        kwargs: Dict[str, Any] = {"origin": origin, "direction": direction, "rng": self.rng}
        if energy is not None:
            kwargs["energy"] = energy
        self.submit("fire_photon", commands.fire_photon, **kwargs)

    def set_temperature(self, temperature: float) -> None:
        self.submit("set_temperature", commands.set_temperature, temperature)

    def set_magnetic_field(self, field) -> None:
        self.submit("set_magnetic_field", commands.set_magnetic_field, field)

    def set_time_scale(self, time_scale: float) -> None:
        self.submit("set_time_scale", commands.set_time_scale, time_scale)

    def pause(self) -> None:
        self.submit("pause", commands.set_run_flag, False)

    def resume(self) -> None:
        self.submit("resume", commands.set_run_flag, True)

    def set_vortex(self, point=None) -> None:
        self.submit("set_vortex", commands.set_vortex, point)

    def ionize(self, uid: str, delta: float = 1.0) -> None:
        self.submit("ionize", commands.ionize_atom, uid, delta)

    def lightning(self, point) -> None:
        self.submit("lightning", commands.lightning_strike, point, rng=self.rng)

    def blast(self, point) -> None:
        self.submit("blast", commands.blast, point)

    # -----------------------
    # Stepping
    # -----------------------
    def advance(self, frame_delta: float = MAX_FRAME_DT) -> bool:
        """
        Apply pending commands, then run one tick if the simulation is running.
        Returns True when a tick was committed.
        """
        self.apply_pending()
        if not self._state.is_running:
            return False
        dt = clamp_dt(frame_delta, self._state.time_scale)
        try:
            new_state, report = self.pipeline.run(self._state, dt, self.rng)
        except Exception:
            logger.exception("Simulation tick failed; state left unchanged.")
            return False

        self._state = new_state
        self.last_report = report
        self.metrics.update(new_state, report.formed, report.broken)
        if report.formed or report.broken or report.struck:
            logger.debug(f"Frame {new_state.frame}: +{report.formed} bonds, "
                         f"-{report.broken} broken, {report.struck} photon hits")
        return True

    def run(self, n_steps: int = 1000, frame_delta: float = MAX_FRAME_DT,
            update_callback: Optional[Callable[["Simulation"], None]] = None,
            callback_interval: int = 10) -> int:
        """
        Synchronous loop of `n_steps` frames. Returns the number of committed ticks.
        update_callback is called every `callback_interval` committed ticks.
        """
        committed = 0
        for _ in range(n_steps):
            if self.advance(frame_delta):
                committed += 1
                if update_callback is not None and committed % callback_interval == 0:
                    try:
                        update_callback(self)
                    except Exception:
                        logger.exception("update_callback failed during run.")
        summary = self.metrics.summary()
        logger.info(f"Run completed: {committed} ticks, bonds formed={summary['bonds_formed']} "
                    f"broken={summary['bonds_broken']}")
        return committed

    # -----------------------
    # Background thread
    # -----------------------
    def start(self, interval: float = 0.02, frame_delta: Optional[float] = None) -> None:
        """
        Run ticks on a background thread every `interval` seconds. Commands
        may be submitted from any thread while it runs.
        """
        if self._looping:
            logger.debug("Simulation already running; start() ignored.")
            return
        self._looping = True
        delta = frame_delta if frame_delta is not None else interval

        def loop():
            while self._looping:
                self.advance(delta)
                time.sleep(interval)

        self._thread = threading.Thread(target=loop, daemon=True)
        self._thread.start()
        logger.info("Simulation background thread started.")

    def stop(self) -> None:
        self._looping = False
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
        logger.info("Simulation background thread stopped.")

    def history(self) -> Dict[str, List[float]]:
        return {k: v.tolist() for k, v in self.metrics.get_plot_data().items()}
