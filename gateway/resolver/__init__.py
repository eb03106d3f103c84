"""Name resolution: namehash, multihash and the registry contract call."""
