"""
Tests for infix to postfix and infix to prefix conversion.
"""

import pytest


class TestInfixToPostfix:
    """Tests for postfix conversion."""

    def test_textbook_example(self):
        """Test A * (B + C) - D/E."""
        from stackviz import convert_to_postfix

        trace = convert_to_postfix("A * (B + C) - D/E")

        assert trace.final_output == "A B C + * D E / -"

    def test_left_associative(self):
        """Test that equal precedence pops, giving left-to-right grouping."""
        from stackviz import convert_to_postfix

        assert convert_to_postfix("A-B-C").final_output == "A B - C -"
        assert convert_to_postfix("A/B*C").final_output == "A B / C *"

    def test_exponent_is_left_associative(self):
        """Test that '^' follows the same equal-precedence rule."""
        from stackviz import convert_to_postfix

        assert convert_to_postfix("A^B^C").final_output == "A B ^ C ^"

    def test_precedence(self):
        """Test that higher precedence binds tighter."""
        from stackviz import convert_to_postfix

        assert convert_to_postfix("A+B*C").final_output == "A B C * +"
        assert convert_to_postfix("A*B+C").final_output == "A B * C +"
        assert convert_to_postfix("A+B*C^D").final_output == "A B C D ^ * +"

    def test_single_operand(self):
        """Test an expression with one operand."""
        from stackviz import convert_to_postfix

        trace = convert_to_postfix("total")

        assert trace.final_output == "total"
        assert len(trace) == 3

    def test_step_states(self):
        """Test stack and output snapshots after every token."""
        from stackviz import convert_to_postfix

        trace = convert_to_postfix("A * (B + C) - D/E")
        stacks = [step.stack_snapshot for step in trace]
        outputs = [" ".join(step.output_snapshot) for step in trace]

        assert stacks == [
            (),
            (),
            ("*",),
            ("*", "("),
            ("*", "("),
            ("*", "(", "+"),
            ("*", "(", "+"),
            ("*",),
            ("-",),
            ("-",),
            ("-", "/"),
            ("-", "/"),
            (),
        ]
        assert outputs[7] == "A B C +"
        assert outputs[8] == "A B C + *"
        assert outputs[-1] == "A B C + * D E / -"

    def test_rule_references(self):
        """Test which algorithm rule each step points at."""
        from stackviz import convert_to_postfix

        trace = convert_to_postfix("A * (B + C) - D/E")
        rules = [step.rule_ref for step in trace]

        assert rules[0] == (0,)
        assert rules[1] == (1,)
        assert rules[2] == (4, 0)
        assert rules[3] == (2,)
        assert rules[5] == (4, 1, 0)
        assert rules[7] == (3, 0, 1)
        assert rules[8] == (4, 1, 1)
        assert rules[10] == (4, 1, 2)
        assert rules[-1] == (5,)

    def test_explanations(self):
        """Test explanation wording for the comparison branches."""
        from stackviz import convert_to_postfix

        trace = convert_to_postfix("A * (B + C) - D/E")

        assert trace[1].explanation.startswith("Token is an operand ('A')")
        assert "less than the top of the stack ('*')" in trace[8].explanation
        assert "greater than the top of the stack ('-')" in trace[10].explanation
        assert "equal to" in convert_to_postfix("A-B-C")[4].explanation

    def test_changed_flags(self):
        """Test that changed marks exactly the steps whose output changed."""
        from stackviz import convert_to_postfix

        trace = convert_to_postfix("A+B")

        assert [step.changed for step in trace] == [False, True, False, True, True]

    def test_start_and_drain_records(self):
        """Test that the trace is framed by token-less records."""
        from stackviz import convert_to_postfix

        trace = convert_to_postfix("(A + B) * C")

        assert trace[0].token is None
        assert trace[-1].token is None
        assert trace[0].token_index == -1
        assert [step.token for step in trace.token_steps] == [t.text for t in trace.tokens]
        assert [step.token_index for step in trace.token_steps] == list(range(7))

    def test_ends_with_empty_stack(self):
        """Test that every valid conversion drains the operator stack."""
        from stackviz import convert_to_postfix

        for expression in ["A", "A+B", "((A))", "A*(B-(C/D))^E", "x1 + 2.5 * y"]:
            trace = convert_to_postfix(expression)
            assert trace.final_step.stack_snapshot == ()
            assert trace.final_output

    def test_unmatched_open_paren(self):
        """Test that '(' left on the stack fails after the full scan."""
        from stackviz import convert_to_postfix
        from stackviz.utils.errors import MismatchedParenthesesError

        with pytest.raises(MismatchedParenthesesError):
            convert_to_postfix("(A+B")

    def test_unmatched_close_paren(self):
        """Test that ')' with no '(' on the stack fails."""
        from stackviz import convert_to_postfix
        from stackviz.utils.errors import ErrorKind, MismatchedParenthesesError

        with pytest.raises(MismatchedParenthesesError) as exc_info:
            convert_to_postfix("A+B)")

        assert exc_info.value.kind == ErrorKind.MISMATCHED_PARENTHESES

    def test_validation_errors(self):
        """Test that structural errors abort before running."""
        from stackviz import convert_to_postfix
        from stackviz.utils.errors import OperatorBeforeCloseParenError, InvalidCharacterError

        with pytest.raises(OperatorBeforeCloseParenError):
            convert_to_postfix("A +)")
        with pytest.raises(InvalidCharacterError):
            convert_to_postfix("A + B!")

    def test_runs_are_independent(self):
        """Test that repeated runs give equal traces and share no state."""
        from stackviz.engine import InfixToPostfixConverter

        converter = InfixToPostfixConverter()
        first = converter.run("A*(B+C)")
        converter.run("X-Y-Z")
        second = converter.run("A*(B+C)")

        assert first == second
        assert first is not second


class TestInfixToPrefix:
    """Tests for prefix conversion."""

    def test_textbook_example(self):
        """Test A * (B + C) - D/E."""
        from stackviz import convert_to_prefix

        trace = convert_to_prefix("A * (B + C) - D/E")

        assert trace.final_output == "- * A + B C / D E"

    def test_precedence(self):
        """Test simple precedence cases."""
        from stackviz import convert_to_prefix

        assert convert_to_prefix("A+B*C").final_output == "+ A * B C"
        assert convert_to_prefix("(A+B)*C").final_output == "* + A B C"

    def test_reversed_traversal(self):
        """Test that tokens are read right to left with original indices."""
        from stackviz import convert_to_prefix

        trace = convert_to_prefix("A * (B + C) - D/E")

        assert [step.token for step in trace.token_steps] == [
            "E", "/", "D", "-", ")", "C", "+", "B", "(", "*", "A",
        ]
        assert [step.token_index for step in trace.token_steps] == list(range(10, -1, -1))

    def test_step_states(self):
        """Test stack and prepended output after every token."""
        from stackviz import convert_to_prefix

        trace = convert_to_prefix("A * (B + C) - D/E")

        assert trace[3].output_snapshot == "D E"
        assert trace[4].output_snapshot == "/ D E"
        assert trace[4].stack_snapshot == ("-",)
        assert trace[5].stack_snapshot == ("-", ")")
        assert trace[7].stack_snapshot == ("-", ")", "+")
        assert trace[9].output_snapshot == "+ B C / D E"
        assert trace[9].stack_snapshot == ("-",)
        assert trace[10].stack_snapshot == ("-", "*")
        assert trace[-1].output_snapshot == "- * A + B C / D E"
        assert trace[-1].stack_snapshot == ()

    def test_rule_references(self):
        """Test which algorithm rule each step points at."""
        from stackviz import convert_to_prefix

        trace = convert_to_prefix("A * (B + C) - D/E")

        assert trace[0].rule_ref == (0, 1)
        assert trace[1].rule_ref == (2,)
        assert trace[2].rule_ref == (5, 0)
        assert trace[4].rule_ref == (5, 1, 1)
        assert trace[5].rule_ref == (3,)
        assert trace[7].rule_ref == (5, 1, 0)
        assert trace[9].rule_ref == (4, 0, 1)
        assert trace[10].rule_ref == (5, 1, 2)
        assert trace[-1].rule_ref == (6,)

    def test_validation_uses_original_order(self):
        """Test that boundary rules are not inverted by the reversal."""
        from stackviz import convert_to_prefix
        from stackviz.utils.errors import InvalidEndError, InvalidStartError

        with pytest.raises(InvalidStartError):
            convert_to_prefix("+ A")
        with pytest.raises(InvalidEndError):
            convert_to_prefix("A +")

    def test_mismatched_parentheses(self):
        """Test unbalanced input in both directions."""
        from stackviz import convert_to_prefix
        from stackviz.utils.errors import MismatchedParenthesesError

        with pytest.raises(MismatchedParenthesesError):
            convert_to_prefix("(A+B")
        with pytest.raises(MismatchedParenthesesError):
            convert_to_prefix("A+B)")

    def test_ends_with_empty_stack(self):
        """Test that every valid conversion drains the operator stack."""
        from stackviz import convert_to_prefix

        for expression in ["A", "A+B", "((A))", "A*(B-(C/D))^E"]:
            trace = convert_to_prefix(expression)
            assert trace.final_step.stack_snapshot == ()
            assert trace.final_output
            assert trace.final_output == trace.final_output.strip()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
