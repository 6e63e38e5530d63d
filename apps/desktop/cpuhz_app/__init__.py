"""CpuHz desktop tray application."""
