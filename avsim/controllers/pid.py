class PIDController:
    """Discrete PID. The integral is not clamped."""

    def __init__(self):
        self.integral = 0.0
        self.previous_error = 0.0

    def calculate(self, target: float, previous: float, p: float, i: float, d: float, dt: float) -> float:
        error = target - previous

        self.integral += error * dt
        derivative = (error - self.previous_error) / dt
        output = p * error + i * self.integral + d * derivative

        self.previous_error = error
        return output

    def reset(self):
        self.integral = 0.0
        self.previous_error = 0.0
