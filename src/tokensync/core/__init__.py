"""tokensync core: IR, resolution, normalization, transforms, validation."""
