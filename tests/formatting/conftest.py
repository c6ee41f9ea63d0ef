"""Test configuration and fixtures for formatting tests."""

import pytest


# Unindented procedure with nested blocks, comments and strings
PROCEDURE_SOURCE = '''Procedure.i Sum(List values.i())
; accumulate every value
Protected total.i = 0
ForEach values()
If values() > 0 ; skip negatives, EndIf is not a keyword here
total + values()
Else
Debug "EndIf inside a string"
EndIf
Next
ProcedureReturn total
EndProcedure'''

PROCEDURE_FORMATTED = '''Procedure.i Sum(List values.i())
    ; accumulate every value
    Protected total.i = 0
    ForEach values()
        If values() > 0 ; skip negatives, EndIf is not a keyword here
            total + values()
        Else
            Debug "EndIf inside a string"
        EndIf
    Next
    ProcedureReturn total
EndProcedure'''

SELECT_SOURCE = '''Select a
Case 1
If x
y()
Else
z()
EndIf
Default
w()
EndSelect'''

SELECT_FORMATTED = '''Select a
    Case 1
        If x
            y()
        Else
            z()
        EndIf
    Default
        w()
EndSelect'''

NESTED_SELECT_SOURCE = '''Select a
Case 1
Select b
Case 2
x
EndSelect
Case 3
y
EndSelect'''

NESTED_SELECT_FORMATTED = '''Select a
    Case 1
        Select b
            Case 2
                x
        EndSelect
    Case 3
        y
EndSelect'''

MODULE_SOURCE = '''DeclareModule Shapes
Structure Point
x.i
y.i
EndStructure
Declare Area(*p.Point)
EndDeclareModule

Module Shapes
CompilerIf #PB_Compiler_OS = #PB_OS_Windows
Procedure Area(*p.Point)
ProcedureReturn *p\\x * *p\\y
EndProcedure
CompilerElse
Procedure Area(*p.Point) : ProcedureReturn 0 : EndProcedure
CompilerEndIf
EndModule'''

MODULE_FORMATTED = '''DeclareModule Shapes
    Structure Point
        x.i
        y.i
    EndStructure
    Declare Area(*p.Point)
EndDeclareModule

Module Shapes
    CompilerIf #PB_Compiler_OS = #PB_OS_Windows
        Procedure Area(*p.Point)
            ProcedureReturn *p\\x * *p\\y
        EndProcedure
    CompilerElse
        Procedure Area(*p.Point) : ProcedureReturn 0 : EndProcedure
    CompilerEndIf
EndModule'''

MALFORMED_SOURCE = '''EndIf
Next
x = 1
If a
y = 2'''

SAMPLE_SOURCES = [
    PROCEDURE_SOURCE,
    SELECT_SOURCE,
    NESTED_SELECT_SOURCE,
    MODULE_SOURCE,
    MALFORMED_SOURCE,
    "Repeat\nx + 1\nUntil x > 5\nWhile y\ny - 1\nWend\nFor i = 0 To 3\nDebug i\nNext i",
    "Select a\nx = 1\nCase 1\ny\nEndSelect",
    "EndSelect\nElse\nCase 1\nx",
]


@pytest.fixture
def procedure_source():
    """Procedure with loops, an If/Else and a comment."""
    return PROCEDURE_SOURCE


@pytest.fixture
def select_source():
    """Select block with an If/Else inside a Case."""
    return SELECT_SOURCE


@pytest.fixture
def nested_select_source():
    """Select nested inside a Case of another Select."""
    return NESTED_SELECT_SOURCE


@pytest.fixture
def module_source():
    """Module declaration with compiler directives and a one-line procedure."""
    return MODULE_SOURCE


@pytest.fixture
def malformed_source():
    """Stray closers and an unclosed If."""
    return MALFORMED_SOURCE
