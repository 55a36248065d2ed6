"""SensorPanel desktop app and command-line tools."""
