#!/usr/bin/env python3
"""
Quick Start Guide for the rsx parser.

This example walks through parsing markup from source text, reading the
resulting node tree, flattening it, and handling syntax errors.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rsx_parser import (
    NodeType, ParserConfig, RsxParser, RsxSyntaxError, parse, parse_tokens, tokenize
)

MARKUP = """
<div class="card" on:click={toggle}>
    <h1>"Hello"</h1>
    <my-widget data-id=item::ID disabled />
    {body}
</div>
"""


def describe(nodes, indent=0):
    """Print a node tree as an outline."""
    pad = "  " * indent
    for node in nodes:
        if node.node_type is NodeType.ELEMENT:
            attrs = ", ".join(
                f"{a.name_as_string()}={a.value}" if a.value else a.name_as_string()
                for a in node.attributes
            )
            print(f"{pad}<{node.name_as_string()}> [{attrs}]")
            describe(node.children, indent + 1)
        else:
            print(f"{pad}{node.node_type.name.lower()}: {node.value}")


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - rsx parser")
    print("=" * 45)

    # Step 1: Parse source text into a tree
    print("\n📄 Step 1: Parsing markup")
    print("-" * 30)

    nodes = parse(MARKUP)
    describe(nodes)

    card = nodes[0]
    print(f"✅ Root element: {card.name_as_string()}")
    print(f"🏷️  class = {card.get_attribute('class').value_as_string()}")

    # Step 2: Parse a pre-tokenized stream
    print("\n🔤 Step 2: Parsing tokens")
    print("-" * 30)

    stream = tokenize(MARKUP)
    print(f"✅ {len(stream)} top-level token trees")
    print(f"✅ Same tree: {parse_tokens(stream) == nodes}")

    # Step 3: Flatten the tree
    print("\n📋 Step 3: Flat node list")
    print("-" * 30)

    parser = RsxParser(ParserConfig.flat())
    flat = parser.parse(MARKUP)
    print(f"✅ {len(flat)} nodes in document order")
    for node in flat:
        print(f"  - {node.node_type.name.lower()} {node.name_as_string() or node.value}")

    # Step 4: Handle syntax errors
    print("\n❌ Step 4: Syntax errors")
    print("-" * 30)

    for source in ("<a></b>", "<a>", "<a>\n</a"):
        try:
            parser.parse(source)
        except RsxSyntaxError as e:
            print(f"  {source!r}: {e}")

    stats = parser.statistics
    print(f"\n📊 Parses: {stats['total_parses']}, success rate: {stats['success_rate']:.0%}")


if __name__ == "__main__":
    quick_start_example()
