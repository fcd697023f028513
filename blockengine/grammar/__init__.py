"""Value grammar engine: tokens, raw values, syntax variations and slot options."""
