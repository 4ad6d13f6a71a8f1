"""Shared fixtures for the test suite."""

import textwrap

import pytest

CALCULATOR_SOURCE = textwrap.dedent("""\
    using System;

    namespace Demo.Math
    {
        /// <summary>
        /// Performs basic arithmetic.
        /// </summary>
        public class Calculator
        {
            /// <summary>Adds two numbers.</summary>
            /// <param name="a">The first operand.</param>
            /// <param name="b">The second operand.</param>
            /// <returns>The sum of both operands.</returns>
            public int Add(int a, int b)
            {
                return a + b;
            }

            /// <summary>Gets the last result.</summary>
            public int Last { get; private set; }

            private int _count;

            public void Reset()
            {
                _count = 0;
            }
        }
    }
""")


@pytest.fixture
def calculator_source() -> str:
    """C# source with a documented class, method and property."""
    return CALCULATOR_SOURCE
