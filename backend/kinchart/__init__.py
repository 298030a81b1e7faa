"""KinChart: family medical records service."""
