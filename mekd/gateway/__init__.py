"""HTTP gateway for MEKD."""
