import unittest

from avsim.domain import config
from avsim.domain.models import ConfigUpdate, LaneChoice, ManualControl, SimulationMode
from avsim.kernel.commands import (
    ManualControlCommand, StartSimulationCommand, StopSimulationCommand, UpdateConfigCommand
)
from avsim.kernel.simulation_kernel import SimulationKernel

DT = 1.0 / config.TARGET_FPS

def overtaking_kernel(obstacle_starts=config.OBSTACLE_START_NODES):
    kernel = SimulationKernel()
    kernel.initialize(obstacle_starts=obstacle_starts)
    kernel.queue_command(UpdateConfigCommand(ConfigUpdate(
        mode=SimulationMode.OVERTAKE_MANEUVER, lane_choice=LaneChoice.AUTOMATIC
    )))
    kernel.queue_command(StartSimulationCommand())
    return kernel

class TestDeterminism(unittest.TestCase):
    def test_determinism(self):
        # Run 1
        kernel1 = overtaking_kernel()
        for i in range(240):
            kernel1.run_tick(timestamp=i * DT)
        state1 = kernel1.get_state()

        # Run 2
        kernel2 = overtaking_kernel()
        for i in range(240):
            kernel2.run_tick(timestamp=i * DT)
        state2 = kernel2.get_state()

        self.assertEqual(state1.tick, 239)
        self.assertEqual(state1.ego, state2.ego)
        self.assertEqual(state1.obstacles, state2.obstacles)
        self.assertEqual(state1.path, state2.path)
        self.assertEqual(kernel1.get_telemetry(), kernel2.get_telemetry())

    def test_different_obstacles(self):
        # one obstacle right ahead of the ego vehicle
        kernel1 = overtaking_kernel(obstacle_starts=[4])
        kernel2 = overtaking_kernel(obstacle_starts=[])

        for i in range(240):
            kernel1.run_tick(timestamp=i * DT)
            kernel2.run_tick(timestamp=i * DT)

        self.assertEqual(len(kernel1.get_state().obstacles), 1)
        self.assertEqual(kernel2.get_state().obstacles, [])
        self.assertNotEqual(kernel1.get_state().ego, kernel2.get_state().ego)

class TestCommands(unittest.TestCase):
    def setUp(self):
        self.kernel = SimulationKernel()
        self.kernel.initialize()

    def test_commands_apply_on_next_tick(self):
        self.kernel.queue_command(UpdateConfigCommand(ConfigUpdate(stanley_gain=2.5)))
        self.assertEqual(len(self.kernel.command_queue), 1)
        self.assertEqual(self.kernel.config.stanley_gain, config.STANLEY_GAIN)
        self.kernel.run_tick(timestamp=0.0)
        self.assertEqual(self.kernel.config.stanley_gain, 2.5)
        self.assertEqual(len(self.kernel.command_queue), 0)

    def test_partial_update_keeps_other_fields(self):
        self.kernel.queue_command(UpdateConfigCommand(ConfigUpdate(p=3.0)))
        self.kernel.queue_command(UpdateConfigCommand(ConfigUpdate(d=0.5)))
        self.kernel.run_tick(timestamp=0.0)
        self.assertEqual(self.kernel.config.p, 3.0)
        self.assertEqual(self.kernel.config.d, 0.5)
        self.assertEqual(self.kernel.config.mode, SimulationMode.MANUAL_CONTROL)

    def test_manual_control(self):
        self.kernel.queue_command(StartSimulationCommand())
        self.kernel.queue_command(ManualControlCommand(ManualControl(throttle=1.0, steering=-0.5)))
        self.kernel.run_tick(timestamp=0.0)
        report = self.kernel.run_tick(timestamp=0.5)

        self.assertTrue(report.stepped)
        self.assertEqual(self.kernel.config.throttle, 1.0)
        ego = self.kernel.get_vehicle("ego")
        self.assertGreater(ego.speed, 0.0)
        self.assertLess(ego.steeringAngle, 0.0)

    def test_stop_resets_vehicles(self):
        start = self.kernel.get_vehicle("ego")
        self.kernel.queue_command(StartSimulationCommand())
        self.kernel.queue_command(ManualControlCommand(ManualControl(throttle=1.0, steering=0.0)))
        for i in range(30):
            self.kernel.run_tick(timestamp=i * DT)
        self.assertNotEqual(self.kernel.get_vehicle("ego"), start)

        self.kernel.queue_command(StopSimulationCommand())
        report = self.kernel.run_tick(timestamp=30 * DT)
        self.assertTrue(report.reset)
        self.assertFalse(self.kernel.config.running)
        self.assertEqual(self.kernel.get_vehicle("ego"), start)

    def test_queue_length_and_clear(self):
        queue = self.kernel.command_queue
        queue.add(StartSimulationCommand())
        queue.add(StopSimulationCommand())
        self.assertEqual(len(queue), 2)
        queue.clear()
        self.assertEqual(len(queue), 0)
        self.assertEqual(queue.drain(), [])

    def test_unknown_vehicle(self):
        self.assertIsNone(self.kernel.get_vehicle("nope"))
        self.assertIsNotNone(self.kernel.get_vehicle("obstacle-2"))

if __name__ == '__main__':
    unittest.main()
