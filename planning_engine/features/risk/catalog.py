# planning_engine/features/risk/catalog.py
"""
Static mitigation and contingency content, keyed by risk category.
"""

from .schemas import MitigationStrategy, MonitoringRecommendation, RiskCategory, RiskContingencyPlan

# ===========================================
# Mitigation strategies
# ===========================================

WEATHER_MONITORING = MitigationStrategy(
    strategy="Weather monitoring and contingency planning",
    implementation="Establish 72-hour weather monitoring, prepare covered areas, have evacuation plan",
    cost_estimate="medium",
    effectiveness="high",
)
TEMPORARY_SHELTER = MitigationStrategy(
    strategy="Temporary shelter infrastructure",
    implementation="Rent additional tents, covered walkways, and weather protection",
    cost_estimate="high",
    effectiveness="high",
)
WEATHER_PROTOCOLS = MitigationStrategy(
    strategy="Weather-based decision protocols",
    implementation="Define clear go/no-go criteria, communication plans, refund policies",
    cost_estimate="low",
    effectiveness="medium",
)

SAFETY_PLAN = MitigationStrategy(
    strategy="Comprehensive safety plan",
    implementation="Develop detailed safety protocols, emergency response procedures, staff training",
    cost_estimate="medium",
    effectiveness="high",
)
MEDICAL_SERVICES = MitigationStrategy(
    strategy="Enhanced medical and emergency services",
    implementation="On-site medical staff, first aid stations, emergency vehicle access",
    cost_estimate="high",
    effectiveness="high",
)
CROWD_MANAGEMENT = MitigationStrategy(
    strategy="Crowd management systems",
    implementation="Controlled entry/exit points, capacity monitoring, crowd flow design",
    cost_estimate="medium",
    effectiveness="high",
)

PROFESSIONAL_SECURITY = MitigationStrategy(
    strategy="Professional security services",
    implementation="Hire licensed security personnel, implement access control, surveillance systems",
    cost_estimate="high",
    effectiveness="high",
)
ACCESS_CONTROL = MitigationStrategy(
    strategy="Access control and screening",
    implementation="Bag checks, metal detectors, perimeter control, credential verification",
    cost_estimate="medium",
    effectiveness="high",
)
SECURITY_COORDINATION = MitigationStrategy(
    strategy="Communication and coordination",
    implementation="Security communication network, law enforcement liaison, incident reporting",
    cost_estimate="low",
    effectiveness="medium",
)

DIVERSIFIED_REVENUE = MitigationStrategy(
    strategy="Diversified revenue streams",
    implementation="Multiple funding sources, sponsorships, vendor fees, merchandise sales",
    cost_estimate="low",
    effectiveness="high",
)
FINANCIAL_RESERVES = MitigationStrategy(
    strategy="Financial reserves and insurance",
    implementation="Maintain 15-20% contingency fund, event cancellation insurance, vendor guarantees",
    cost_estimate="medium",
    effectiveness="high",
)
COST_CONTROL = MitigationStrategy(
    strategy="Cost control and monitoring",
    implementation="Regular budget reviews, approval processes, vendor contract management",
    cost_estimate="low",
    effectiveness="medium",
)

OPERATIONAL_PLANNING = MitigationStrategy(
    strategy="Detailed operational planning",
    implementation="Comprehensive timelines, responsibility matrices, communication protocols",
    cost_estimate="low",
    effectiveness="high",
)
REDUNDANT_SYSTEMS = MitigationStrategy(
    strategy="Redundancy and backup systems",
    implementation="Backup vendors, alternative suppliers, redundant equipment, cross-trained staff",
    cost_estimate="medium",
    effectiveness="high",
)
REHEARSALS = MitigationStrategy(
    strategy="Regular rehearsals and testing",
    implementation="Practice runs, system tests, staff drills, vendor coordination meetings",
    cost_estimate="low",
    effectiveness="medium",
)

# ===========================================
# Monitoring
# ===========================================

MONITORING = {
    RiskCategory.WEATHER: MonitoringRecommendation(
        area="Weather Monitoring",
        frequency="Continuous during event period",
        tools="Professional weather services, local observations, radar monitoring",
        triggers="Severe weather warnings, precipitation > 50%, winds > 25 mph",
    ),
    RiskCategory.SAFETY: MonitoringRecommendation(
        area="Safety Monitoring",
        frequency="Continuous during event",
        tools="Incident reporting system, crowd density monitors, safety patrol reports",
        triggers="Any incidents, overcrowding, equipment failures",
    ),
    RiskCategory.FINANCIAL: MonitoringRecommendation(
        area="Financial Monitoring",
        frequency="Daily during event preparation",
        tools="Budget tracking systems, vendor payment status, revenue monitoring",
        triggers="Budget variance > 10%, payment delays, revenue shortfalls",
    ),
}

# ===========================================
# Contingency plans
# ===========================================

CONTINGENCY_PLANS = {
    RiskCategory.WEATHER: RiskContingencyPlan(
        trigger_conditions=[
            "Severe weather warning issued",
            "Precipitation probability > 70%",
            "Wind speeds > 30 mph",
            "Temperature < 0C or > 40C",
        ],
        immediate_actions=[
            "Activate weather monitoring protocol",
            "Notify all stakeholders",
            "Prepare sheltered areas",
            "Secure loose equipment and signage",
        ],
        escalation_procedures=[
            "30% capacity reduction if moderate conditions",
            "Postponement if severe conditions persist",
            "Full evacuation if dangerous conditions",
            "Communication to all attendees and vendors",
        ],
        resource_requirements=[
            "Additional tents and covered areas",
            "Weather monitoring equipment",
            "Emergency communication systems",
            "Transportation for evacuation if needed",
        ],
    ),
    RiskCategory.SAFETY: RiskContingencyPlan(
        trigger_conditions=[
            "Any safety incident occurs",
            "Overcrowding in any area",
            "Equipment failure affecting safety",
            "Medical emergency",
        ],
        immediate_actions=[
            "Secure incident area",
            "Provide immediate assistance",
            "Contact emergency services if needed",
            "Document incident details",
        ],
        escalation_procedures=[
            "Area closure if safety risk persists",
            "Crowd redistribution protocols",
            "Event suspension if widespread risk",
            "Full evacuation if necessary",
        ],
        resource_requirements=[
            "On-site medical personnel",
            "First aid supplies and equipment",
            "Emergency communication systems",
            "Crowd control barriers and signage",
        ],
    ),
    RiskCategory.SECURITY: RiskContingencyPlan(
        trigger_conditions=[
            "Security threat identified",
            "Unauthorized access attempt",
            "Disruptive behavior",
            "Suspicious activity reported",
        ],
        immediate_actions=[
            "Assess threat level",
            "Contain security situation",
            "Contact law enforcement if needed",
            "Protect other attendees",
        ],
        escalation_procedures=[
            "Increase security presence",
            "Implement additional screening",
            "Area lockdown if necessary",
            "Event cancellation for severe threats",
        ],
        resource_requirements=[
            "Professional security personnel",
            "Communication equipment",
            "Access control systems",
            "Law enforcement liaison",
        ],
    ),
    RiskCategory.FINANCIAL: RiskContingencyPlan(
        trigger_conditions=[
            "Budget overrun > 10%",
            "Revenue shortfall > 15%",
            "Vendor payment default",
            "Unexpected major expense",
        ],
        immediate_actions=[
            "Assess financial impact",
            "Review remaining budget",
            "Identify cost reduction opportunities",
            "Communicate with stakeholders",
        ],
        escalation_procedures=[
            "Implement cost reduction measures",
            "Negotiate vendor payment terms",
            "Seek additional funding sources",
            "Scale back event if necessary",
        ],
        resource_requirements=[
            "Emergency fund access",
            "Financial management tools",
            "Vendor contract flexibility",
            "Alternative funding sources",
        ],
    ),
    RiskCategory.OPERATIONAL: RiskContingencyPlan(
        trigger_conditions=[
            "Key vendor cancellation",
            "Staff shortage",
            "Equipment failure",
            "Schedule disruption",
        ],
        immediate_actions=[
            "Assess operational impact",
            "Activate backup plans",
            "Reassign resources as needed",
            "Communicate changes to team",
        ],
        escalation_procedures=[
            "Implement alternative solutions",
            "Adjust event schedule",
            "Reduce scope if necessary",
            "Postpone if critical systems fail",
        ],
        resource_requirements=[
            "Backup vendor contacts",
            "Cross-trained staff",
            "Redundant equipment",
            "Flexible scheduling system",
        ],
    ),
}
