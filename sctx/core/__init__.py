"""HTTP-style errors, response envelopes, identifiers, models and exception recovery."""