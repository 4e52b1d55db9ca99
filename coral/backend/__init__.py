"""Code emitters for the Coral SAST."""
