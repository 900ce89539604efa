"""Core job-runner domain: store, state machine, scheduler and projections."""
