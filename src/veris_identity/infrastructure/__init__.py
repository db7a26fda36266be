"""Infrastructure: provider verifiers, message buses and store implementations."""
