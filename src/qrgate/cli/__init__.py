"""QRGate command line interface."""
