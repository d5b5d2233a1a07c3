"""SocialMesh command-line interface."""
