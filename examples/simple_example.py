#!/usr/bin/env python3
"""Simple example of using the Math Atoms converter"""

import json

from math_atoms import create_converter

# Create converter for text-mode sources
converter = create_converter(default_mode='text')

# Your text with some styling and math
text = r"""\textbf{Note:} the value of \textcolor{red}{$\alpha$} is {\small small} \S 3"""

# Parse the text
print("Parsing text...")
result = converter.parse_latex(text)

print(f"\nFound {len(result.atoms)} atoms, {len(result.errors)} errors")
for error in result.errors:
    print(f"   {error.code.value}: {error.arg}")

# Serialize back to minimal LaTeX
print("\nMinimal LaTeX:")
print(converter.to_latex(result.atoms))

# Save to file
with open("my_atoms.json", "w", encoding="utf-8") as f:
    json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
print("\nResults saved to my_atoms.json")
