# radialmap_data
# Bundled sample hierarchy, shipped as package data.
