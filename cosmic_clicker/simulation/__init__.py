"""Pure simulation helpers: economy, resources, cargo, physics, spawning."""
